"""
JSON-LD extraction and grouping.

Every ``<script type="application/ld+json">`` block is decoded; a block
holding an array contributes each of its elements. Instances are then
bucketed by a type key derived from ``@type``.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup

from pagediff.canonical import Json

LD_JSON_TYPE = "application/ld+json"
UNKNOWN_TYPE = "unknown"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaSet:
    """JSON-LD instances of one page, in document order and by type key."""
    url: str
    schemas: Tuple[Json, ...] = ()
    by_type: Dict[str, Tuple[Json, ...]] = field(default_factory=dict)
    errors: Tuple[str, ...] = ()

    @property
    def count(self) -> int:
        return len(self.schemas)


def type_key(instance: Json) -> str:
    """
    Grouping key for one instance.

        {"@type": "Product"}            -> "Product"
        {"@type": ["Product", "Book"]}  -> "Book, Product"
        {}                              -> "unknown"
    """
    if not isinstance(instance, dict):
        return UNKNOWN_TYPE

    declared = instance.get("@type")
    if isinstance(declared, list):
        names = sorted(str(name) for name in declared)
        return ", ".join(names) if names else UNKNOWN_TYPE
    if declared is None or declared == "":
        return UNKNOWN_TYPE
    if isinstance(declared, str):
        return declared
    return json.dumps(declared, sort_keys=True, ensure_ascii=False)


def group_by_type(instances: Iterable[Json]) -> Dict[str, Tuple[Json, ...]]:
    """Bucket instances by ``type_key``; first-seen order is kept inside each bucket."""
    buckets: Dict[str, List[Json]] = {}
    for instance in instances:
        buckets.setdefault(type_key(instance), []).append(instance)
    return {key: tuple(items) for key, items in buckets.items()}


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def extract_schemas(
    soup: BeautifulSoup,
    url: str,
    logger: Optional[logging.Logger] = None
) -> SchemaSet:
    """
    Collect every JSON-LD instance in a parsed page.

    A block that fails to decode is skipped with a warning; the rest of
    the page is still processed.
    """
    logger = logger or log
    instances: List[Json] = []
    errors: List[str] = []

    for i, script in enumerate(soup.find_all("script", attrs={"type": LD_JSON_TYPE})):
        text = script.get_text()

        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            message = f"JSON-LD block {i} on {url} skipped: {e}"
            logger.warning(message, extra={"url": url, "error_code": "SCHEMA_PARSE_FAIL"})
            errors.append(message)
            continue

        if isinstance(data, list):
            instances.extend(data)
        else:
            instances.append(data)

    return SchemaSet(
        url=url,
        schemas=tuple(instances),
        by_type=group_by_type(instances),
        errors=tuple(errors),
    )
