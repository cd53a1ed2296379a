"""
HTML comparison pipeline.

Fetch both pages, simplify and format them, then diff line by line.
"""

from typing import List, Optional

from rich.console import Console

from pagediff.fetch import Document, FetchSettings, fetch_documents
from pagediff.linediff import Change, diff_lines, is_identical
from pagediff.logs import setup as setup_logs
from pagediff.render import render_html_diff
from pagediff.simplify import format_html, simplify_html


def canonical_html(raw: str) -> str:
    """Both formatting passes: simplify + prettify, then the lxml re-serialization."""
    return format_html(simplify_html(raw))


def diff_documents(doc_a: Document, doc_b: Document) -> List[Change]:
    return diff_lines(
        canonical_html(doc_a.text),
        canonical_html(doc_b.text),
        ignore_whitespace=True
    )


async def run(
    url_a: str,
    url_b: str,
    settings: Optional[FetchSettings] = None,
    console: Optional[Console] = None,
    context: int = 3,
    log=None
) -> List[Change]:
    """
    Run the HTML comparison for two URLs.

    Raises:
        FetchError: if either page cannot be fetched.
    """
    log = log or setup_logs(mode="html")

    doc_a, doc_b = await fetch_documents(url_a, url_b, settings)

    changes = diff_documents(doc_a, doc_b)
    log.info("html comparison complete", extra={
        "step": "compare",
        "runs": len(changes),
        "identical": is_identical(changes),
    })

    render_html_diff(changes, url_a, url_b, console, context=context)
    return changes
