"""
Schema comparison pipeline.

Fetch both pages, extract their JSON-LD, compare per type, render the
report and optionally export it as JSON.
"""

from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup
from rich.console import Console

from pagediff.compare import ComparisonReport, compare
from pagediff.fetch import Document, FetchSettings, fetch_documents
from pagediff.logs import setup as setup_logs
from pagediff.render import render_schema_report
from pagediff.report import write_report
from pagediff.schemas import extract_schemas


def compare_documents(doc_a: Document, doc_b: Document, log=None) -> ComparisonReport:
    """Extract and compare the structured data of two fetched pages."""
    set_a = extract_schemas(BeautifulSoup(doc_a.text, "lxml"), doc_a.url, log)
    set_b = extract_schemas(BeautifulSoup(doc_b.text, "lxml"), doc_b.url, log)
    return compare(set_a, set_b)


async def run(
    url_a: str,
    url_b: str,
    json_out: Optional[Path] = None,
    settings: Optional[FetchSettings] = None,
    console: Optional[Console] = None,
    log=None
) -> ComparisonReport:
    """
    Run the schema comparison for two URLs.

    Raises:
        FetchError: if either page cannot be fetched.
    """
    log = log or setup_logs(mode="schema")

    doc_a, doc_b = await fetch_documents(url_a, url_b, settings)

    report = compare_documents(doc_a, doc_b, log)
    log.info("schema comparison complete", extra={
        "step": "compare",
        "types": len(report.comparisons),
        "identical": report.all_types_identical,
    })

    render_schema_report(report, console)

    if json_out is not None:
        write_report(json_out, report)
        log.info("report written", extra={"step": "export", "path": str(json_out)})

    return report
