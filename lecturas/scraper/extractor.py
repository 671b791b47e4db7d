"""Readings extraction: turns Vatican News HTML into a :class:`ReadingsResult`.

Extraction is written against the small read-only :class:`HtmlNode`
interface so the rules below do not depend on BeautifulSoup directly.
Missing markup never raises; the affected fields simply stay ``None``.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from bs4 import BeautifulSoup, Tag

from lecturas.scraper.models import ExtractedReading, ReadingsResult

INDICATION_CLASS = "indicazioneLiturgica"
SECTION_SELECTOR = "section.section--evidence"
FIRST_READING_HEADING = "Lectura del Día"
GOSPEL_HEADING = "Evangelio del Día"


class HtmlNode(Protocol):
    """Read-only view of a parsed HTML element."""

    def select(self, css: str) -> Sequence["HtmlNode"]:
        """Return descendants matching the CSS selector *css*."""

    def descendants(self, tag: str) -> Sequence["HtmlNode"]:
        """Return descendant elements named *tag*, in document order."""

    def text(self) -> str:
        """Return the concatenated text content of the element."""


class SoupNode:
    """:class:`HtmlNode` backed by a BeautifulSoup element."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def select(self, css: str) -> list["SoupNode"]:
        return [SoupNode(t) for t in self._tag.select(css)]

    def descendants(self, tag: str) -> list["SoupNode"]:
        return [SoupNode(t) for t in self._tag.find_all(tag)]

    def text(self) -> str:
        return self._tag.get_text()


def parse_document(html: str) -> HtmlNode:
    """Parse *html* with the lenient built-in parser."""
    return SoupNode(BeautifulSoup(html or "", "html.parser"))


# ---------------------------------------------------------------------------
# Extraction rules
# ---------------------------------------------------------------------------

def _liturgical_indication(doc: HtmlNode) -> Optional[str]:
    matches = doc.select(f'[class*="{INDICATION_CLASS}"]')
    if not matches:
        return None
    return matches[0].text().strip()


def _section_heading(section: HtmlNode) -> str:
    return "".join(h.text() for h in section.descendants("h2")).strip()


def _reading_from_section(section: HtmlNode) -> Optional[ExtractedReading]:
    """Build a reading from the section's paragraphs.

    Paragraph 0 is the introduction ("Lectura del libro de ..."), paragraph 1
    the citation and the rest the body.  Returns ``None`` when the section has
    fewer than two paragraphs.
    """
    paragraphs = section.descendants("p")
    if len(paragraphs) < 2:
        return None

    cita = paragraphs[1].text().strip()
    body = [text for text in (p.text().strip() for p in paragraphs[2:]) if text]
    return ExtractedReading(cita=cita, lectura=" ".join(body))


def extract_from_document(doc: HtmlNode) -> ReadingsResult:
    """Apply the extraction rules to an already-parsed document."""
    primera = ExtractedReading()
    evangelio = ExtractedReading()

    # Later complete sections with the same heading overwrite earlier ones;
    # sections with fewer than two paragraphs leave the reading untouched.
    for section in doc.select(SECTION_SELECTOR):
        heading = _section_heading(section)
        if heading not in (FIRST_READING_HEADING, GOSPEL_HEADING):
            continue
        reading = _reading_from_section(section)
        if reading is None:
            continue
        if heading == FIRST_READING_HEADING:
            primera = reading
        else:
            evangelio = reading

    return ReadingsResult(
        indicacion_liturgica=_liturgical_indication(doc),
        primera_lectura=primera,
        evangelio=evangelio,
    )


def extract_readings(html: str) -> ReadingsResult:
    """Extract the liturgical indication, first reading and gospel from *html*."""
    return extract_from_document(parse_document(html))
