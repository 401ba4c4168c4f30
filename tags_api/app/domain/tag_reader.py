"""Incremental reader for the tag dictionary XML.

Bytes are fed to an ``XMLPullParser`` as they arrive from the tag source and
each top-level ``<table>`` is decoded into a :class:`Table` as soon as its end
tag has been seen. Decoded elements are detached from the tree so memory stays
bounded by the size of the largest single table.

The tool may print several top-level elements in a row, so the input is
parsed inside a synthetic wrapper element opened right after any XML
declaration and closed at end of stream.
"""
from __future__ import annotations

from typing import Iterator
from xml.etree.ElementTree import Element, ParseError, XMLPullParser

from tags_api.app.constants import FALSE_VALUES, TRUE_VALUES, XmlElement
from tags_api.app.domain.models import Desc, Table, Tag

_WRAPPER = "tags-api-document"
_WRAPPER_START = f"<{_WRAPPER}>".encode("ascii")
_WRAPPER_END = f"</{_WRAPPER}>".encode("ascii")
_BOM = b"\xef\xbb\xbf"
_DECLARATION_START = b"<?xml"
_DECLARATION_END = b"?>"


class TagDocumentError(Exception):
    """Raised when the tag dictionary markup cannot be decoded."""


def parse_bool(value: str | None) -> bool:
    """Missing or empty is false; surrounding whitespace is ignored otherwise."""
    if value is None or value == "":
        return False
    value = value.strip()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise TagDocumentError(f"invalid boolean attribute value: {value!r}")


def _own_text(elem: Element) -> str:
    """Character data directly inside ``elem``, skipping text of nested elements."""
    return (elem.text or "") + "".join(child.tail or "" for child in elem)


def _decode_tag(elem: Element) -> Tag:
    descs = tuple(
        Desc(lang=child.get("lang", ""), value=_own_text(child))
        for child in elem
        if child.tag == XmlElement.DESC
    )
    return Tag(
        id=elem.get("id", ""),
        name=elem.get("name", ""),
        type=elem.get("type", ""),
        writable=parse_bool(elem.get("writable")),
        group=elem.get("g2", ""),
        descs=descs,
    )


def decode_table(elem: Element) -> Table:
    """Decode a complete ``<table>`` element. Only direct ``<tag>`` children are considered."""
    return Table(
        name=elem.get("name", ""),
        tags=tuple(_decode_tag(child) for child in elem if child.tag == XmlElement.TAG),
    )


class TagTableReader:
    """Push bytes in with :meth:`feed`, pull completed tables out of the returned iterator.

    Tables are yielded in document order. Tables completed before a syntax
    error in the same chunk are still yielded before the error is raised.
    """

    def __init__(self) -> None:
        self._parser = XMLPullParser(events=("start", "end"))
        self._stack: list[Element] = []
        self._table_depth = 0
        self._head = b""
        self._wrapped = False
        self._has_content = False
        self._closed = False

    def feed(self, data: bytes) -> Iterator[Table]:
        if data.strip():
            self._has_content = True
        if self._wrapped:
            self._feed_parser(data)
        else:
            self._head += data
            self._open_wrapper(final=False)
        return self._drain()

    def close(self) -> Iterator[Table]:
        """Signal end of input.

        An empty stream is a valid, empty dictionary. A stream that ends
        while elements are still open is a :class:`TagDocumentError`.
        """
        if self._closed or not self._has_content:
            self._closed = True
            return iter(())
        self._closed = True
        if not self._wrapped:
            self._open_wrapper(final=True)
        self._feed_parser(_WRAPPER_END)
        return self._finish()

    def _open_wrapper(self, *, final: bool) -> None:
        """Feed the buffered head once it is known where the XML declaration ends."""
        head = self._head
        if head.startswith(_BOM):
            head = head[len(_BOM):]
        head = head.lstrip()
        if not final and len(head) < len(_DECLARATION_START):
            return
        prolog = b""
        if head.startswith(_DECLARATION_START):
            end = head.find(_DECLARATION_END)
            if end < 0:
                if not final:
                    return
                raise TagDocumentError("error reading XML: unterminated XML declaration")
            prolog, head = head[:end + len(_DECLARATION_END)], head[end + len(_DECLARATION_END):]
        self._wrapped = True
        self._head = b""
        self._feed_parser(prolog + _WRAPPER_START + head)

    def _feed_parser(self, data: bytes) -> None:
        try:
            self._parser.feed(data)
        except ParseError as exc:
            raise TagDocumentError(f"error reading XML: {exc}") from exc

    def _finish(self) -> Iterator[Table]:
        yield from self._drain()
        try:
            self._parser.close()
        except ParseError as exc:
            raise TagDocumentError(f"error reading XML: {exc}") from exc

    def _events(self) -> Iterator[tuple[str, Element]]:
        try:
            yield from self._parser.read_events()
        except ParseError as exc:
            raise TagDocumentError(f"error reading XML: {exc}") from exc

    def _drain(self) -> Iterator[Table]:
        for event, elem in self._events():
            if event == "start":
                self._stack.append(elem)
                if elem.tag == XmlElement.TABLE:
                    self._table_depth += 1
                continue

            self._stack.pop()
            if elem.tag != XmlElement.TABLE:
                continue
            self._table_depth -= 1
            if self._table_depth:
                continue
            try:
                table = decode_table(elem)
            finally:
                if self._stack:
                    self._stack[-1].remove(elem)
                elem.clear()
            yield table
