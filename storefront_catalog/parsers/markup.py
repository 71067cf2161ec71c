# storefront_catalog/parsers/markup.py

"""Swappable HTML/XML scanning behind one small interface.

Strategies only ask three questions of a document: which ``<loc>``
values a sitemap lists, which ld+json blocks a page embeds, and which
anchors point at product pages. :class:`SoupMarkupParser` answers them
with BeautifulSoup/lxml, :class:`RegexMarkupParser` with plain regular
expressions for markup lxml chokes on.
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from bs4 import BeautifulSoup, Tag

from storefront_catalog.config.settings import Settings

logger = logging.getLogger("storefront_catalog.parsers")

_HEADINGS: list[str] = ["h1", "h2", "h3", "h4", "h5", "h6"]


@dataclass(frozen=True)
class AnchorCandidate:
    """A product link found on a listing page."""

    href: str
    title: str | None = None
    image: str | None = None


class MarkupParser(Protocol):
    """Document scanning operations used by the strategies."""

    name: str

    def sitemap_locations(self, xml: str) -> list[str]: ...

    def structured_data_blocks(self, page: str) -> list[str]: ...

    def product_anchors(
        self, page: str, path_segment: str,
    ) -> list[AnchorCandidate]: ...


def _product_href_re(path_segment: str) -> re.Pattern[str]:
    return re.compile(re.escape(path_segment) + r"[^\"'?#/\s]+")


def _collapse(text: str | None) -> str | None:
    if text is None:
        return None
    collapsed = " ".join(text.split())
    return collapsed or None


class SoupMarkupParser:
    """BeautifulSoup-backed scanning (lxml for HTML and XML)."""

    name = "soup"

    def sitemap_locations(self, xml: str) -> list[str]:
        soup = BeautifulSoup(xml, "xml")
        locations: list[str] = []
        for loc in soup.find_all("loc"):
            if loc.prefix:
                continue
            text = loc.get_text(strip=True)
            if text:
                locations.append(text)
        return locations

    def structured_data_blocks(self, page: str) -> list[str]:
        soup = BeautifulSoup(page, "lxml")
        blocks: list[str] = []
        for script in soup.find_all(
            "script",
            attrs={"type": re.compile(r"application/ld\+json", re.I)},
        ):
            text = script.string or script.get_text()
            if text and text.strip():
                blocks.append(text)
        return blocks

    @staticmethod
    def _anchor_title(anchor: Tag) -> str | None:
        for img in anchor.find_all("img"):
            alt = _collapse(str(img.get("alt") or ""))
            if alt:
                return alt
        heading = anchor.find(_HEADINGS)
        if isinstance(heading, Tag):
            text = _collapse(heading.get_text(" ", strip=True))
            if text:
                return text
        span = anchor.find(
            "span",
            class_=lambda c: bool(c) and "title" in c.lower(),
        )
        if isinstance(span, Tag):
            return _collapse(span.get_text(" ", strip=True))
        return None

    @staticmethod
    def _anchor_image(anchor: Tag) -> str | None:
        img = anchor.find("img")
        if not isinstance(img, Tag):
            return None
        src = img.get("src") or img.get("data-src")
        return str(src) if src else None

    def product_anchors(
        self, page: str, path_segment: str,
    ) -> list[AnchorCandidate]:
        soup = BeautifulSoup(page, "lxml")
        pattern = _product_href_re(path_segment)
        anchors: list[AnchorCandidate] = []
        for anchor in soup.find_all("a", href=True):
            href = str(anchor.get("href", ""))
            if not pattern.search(href):
                continue
            anchors.append(
                AnchorCandidate(
                    href=href,
                    title=self._anchor_title(anchor),
                    image=self._anchor_image(anchor),
                )
            )
        return anchors


class RegexMarkupParser:
    """Regular-expression scanning, tolerant of badly broken markup."""

    name = "regex"

    _LOC_RE = re.compile(r"<loc>\s*([^<]+?)\s*</loc>", re.I)
    _LD_JSON_RE = re.compile(
        r"<script[^>]*type=[\"']application/ld\+json[\"'][^>]*>"
        r"(.*?)</script>",
        re.I | re.S,
    )
    _ANCHOR_RE = re.compile(r"<a\b([^>]*)>(.*?)</a>", re.I | re.S)
    _HREF_RE = re.compile(r"\bhref=[\"']([^\"']+)[\"']", re.I)
    _ALT_RE = re.compile(
        r"<img\b[^>]*\balt=[\"']([^\"']*)[\"']", re.I,
    )
    _HEADING_RE = re.compile(
        r"<h([1-6])\b[^>]*>(.*?)</h\1>", re.I | re.S,
    )
    _SPAN_TITLE_RE = re.compile(
        r"<span\b[^>]*\bclass=[\"'][^\"']*title[^\"']*[\"'][^>]*>"
        r"(.*?)</span>",
        re.I | re.S,
    )
    _IMG_SRC_RE = re.compile(
        r"<img\b[^>]*?\b(?:data-)?src=[\"']([^\"']+)[\"']", re.I,
    )
    _TAG_RE = re.compile(r"<[^>]+>")

    @classmethod
    def _text(cls, fragment: str) -> str | None:
        return _collapse(html.unescape(cls._TAG_RE.sub(" ", fragment)))

    def sitemap_locations(self, xml: str) -> list[str]:
        return [
            html.unescape(m.group(1))
            for m in self._LOC_RE.finditer(xml)
        ]

    def structured_data_blocks(self, page: str) -> list[str]:
        return [
            m.group(1)
            for m in self._LD_JSON_RE.finditer(page)
            if m.group(1).strip()
        ]

    def _anchor_title(self, inner: str) -> str | None:
        for alt in self._ALT_RE.finditer(inner):
            text = _collapse(html.unescape(alt.group(1)))
            if text:
                return text
        heading = self._HEADING_RE.search(inner)
        if heading:
            text = self._text(heading.group(2))
            if text:
                return text
        span = self._SPAN_TITLE_RE.search(inner)
        if span:
            return self._text(span.group(1))
        return None

    def product_anchors(
        self, page: str, path_segment: str,
    ) -> list[AnchorCandidate]:
        pattern = _product_href_re(path_segment)
        anchors: list[AnchorCandidate] = []
        for match in self._ANCHOR_RE.finditer(page):
            attrs, inner = match.group(1), match.group(2)
            href_match = self._HREF_RE.search(attrs)
            if not href_match:
                continue
            href = html.unescape(href_match.group(1))
            if not pattern.search(href):
                continue
            img = self._IMG_SRC_RE.search(inner)
            anchors.append(
                AnchorCandidate(
                    href=href,
                    title=self._anchor_title(inner),
                    image=html.unescape(img.group(1)) if img else None,
                )
            )
        return anchors


_PARSERS: dict[str, type[SoupMarkupParser] | type[RegexMarkupParser]] = {
    SoupMarkupParser.name: SoupMarkupParser,
    RegexMarkupParser.name: RegexMarkupParser,
}


def get_markup_parser(name: str | None = None) -> MarkupParser:
    """Build the parser registered under *name* (default from settings)."""
    key = (name or Settings.MARKUP_PARSER).lower()
    parser_cls = _PARSERS.get(key)
    if parser_cls is None:
        logger.warning(
            "Unknown markup parser '%s', using '%s'",
            key,
            SoupMarkupParser.name,
        )
        parser_cls = SoupMarkupParser
    return parser_cls()
