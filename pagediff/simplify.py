"""
HTML simplification utilities.

Reduce a page to the markup that matters for a line diff: comments,
styling hooks, scripts, stylesheets and SVG internals are dropped, then
the remaining tree is pretty-printed so both pages share one layout.
"""

import re
from bs4 import BeautifulSoup
from lxml import etree
from lxml import html as lxml_html

from pagediff.schemas import LD_JSON_TYPE

COMMENT_RE = re.compile(r"<!--([\s\S]*?)-->")
BLANK_RUN_RE = re.compile(r"\n\n+")
EMPTY_LINE_RE = re.compile(r"^\s*\n", re.MULTILINE)

STRIPPED_ATTRS = frozenset({"class", "style", "srcset", "imagesrcset", "onclick"})


def strip_noise(html: str) -> str:
    """
    Text-level pre-pass run before parsing.

    Only removes comments and blank lines; everything structural is
    handled on the parsed tree.
    """
    html = COMMENT_RE.sub("", html)
    html = BLANK_RUN_RE.sub("\n", html)
    return EMPTY_LINE_RE.sub("", html)


def _attr_text(el, name: str):
    """Attribute value as written; bs4 splits multi-valued ones like ``rel``."""
    value = el.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value


def simplify_html(html: str, parser: str = "lxml") -> str:
    """
    Canonical, pretty-printed markup for ``html``.

    Steps, in order:
      - strip comments and blank lines (text level)
      - drop class/style/srcset/imagesrcset/onclick and data-* attributes
      - drop <script> unless it is JSON-LD
      - drop every <style> and <template>
      - drop <link> unless rel="canonical"
      - empty every <svg> of children and attributes
    """
    soup = BeautifulSoup(strip_noise(html), parser)

    for el in soup.find_all(True):
        el.attrs = {
            name: value
            for name, value in el.attrs.items()
            if name not in STRIPPED_ATTRS and not name.startswith("data-")
        }

    for el in soup.find_all("script"):
        if el.get("type") != LD_JSON_TYPE:
            el.decompose()

    for el in soup.find_all("style"):
        el.decompose()

    for el in soup.find_all("link"):
        if _attr_text(el, "rel") != "canonical":
            el.decompose()

    for el in soup.find_all("template"):
        el.decompose()

    for el in soup.find_all("svg"):
        el.clear()
        el.attrs = {}

    return soup.prettify()


def format_html(markup: str) -> str:
    """
    Second, independent formatting pass over simplified markup.

    Re-serializes through lxml so line breaks come out the same way for
    both pages regardless of how the first pass wrapped them.
    """
    if not markup.strip():
        return ""

    try:
        doc = lxml_html.document_fromstring(markup)
    except etree.ParserError:
        # nothing but a doctype or whitespace-only text survived simplification
        return markup

    return etree.tostring(doc, method="html", pretty_print=True, encoding="unicode")
