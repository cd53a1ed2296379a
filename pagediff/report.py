"""
JSON export of a schema comparison report.

Handy for CI jobs that diff two deployments and archive the result.
"""

import json
import time
from pathlib import Path
from typing import Any, Dict

from pagediff.compare import ComparisonReport


def write_report(path: Path, report: ComparisonReport):
    """
    Write ``report`` as indented JSON, stamped with the current time.

    Example:
        write_report(Path("out/schema-diff.json"), report)
    """

    payload: Dict[str, Any] = {
        "ts": int(time.time()),
        **report.to_dict()
    }

    path.parent.mkdir(parents=True, exist_ok=True)

    path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False),
        encoding="utf-8"
    )
