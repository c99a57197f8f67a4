from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator
import logging
import xml.etree.ElementTree as ET

from tscat.constants import KNOWN_TYPES, OBSOLETE_TYPES, TranslationType

logger = logging.getLogger(__name__)


class TsFormatError(ValueError):
    """Raised when a document is not a well-formed TS catalog."""


@dataclass(frozen=True)
class Location:
    filename: str
    line: int


@dataclass(frozen=True)
class Message:
    source: str
    comment: str = ""
    translation: str = ""
    numerus_forms: tuple[str, ...] = ()
    numerus: bool = False
    translation_type: str = TranslationType.FINISHED
    locations: tuple[Location, ...] = ()
    extra_comment: str = ""
    translator_comment: str = ""
    old_source: str = ""
    old_comment: str = ""
    id: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.comment)

    @property
    def is_finished(self) -> bool:
        return self.translation_type == TranslationType.FINISHED

    @property
    def is_unfinished(self) -> bool:
        return self.translation_type == TranslationType.UNFINISHED

    @property
    def is_obsolete(self) -> bool:
        return self.translation_type in OBSOLETE_TYPES

    @property
    def translations(self) -> tuple[str, ...]:
        if self.numerus:
            return self.numerus_forms
        if self.translation:
            return (self.translation,)
        return ()


@dataclass(frozen=True)
class Context:
    name: str
    messages: tuple[Message, ...] = ()
    comment: str = ""

    def find(self, source: str, comment: str = "") -> Message | None:
        for message in self.messages:
            if message.source == source and message.comment == comment:
                return message
        return None


@dataclass(frozen=True)
class Catalog:
    language: str
    version: str = ""
    contexts: tuple[Context, ...] = ()
    source_language: str = ""

    def iter_messages(self) -> Iterator[tuple[str, Message]]:
        for context in self.contexts:
            for message in context.messages:
                yield context.name, message

    def context(self, name: str) -> Context | None:
        for context in self.contexts:
            if context.name == name:
                return context
        return None

    def find(self, context: str, source: str, comment: str = "") -> Message | None:
        for ctx in self.contexts:
            if ctx.name != context:
                continue
            found = ctx.find(source, comment)
            if found is not None:
                return found
        return None

    @property
    def message_count(self) -> int:
        return sum(len(context.messages) for context in self.contexts)


@dataclass
class _LocationState:
    """Running filename/line used to resolve relative location annotations."""

    filename: str = ""
    lines: dict[str, int] = field(default_factory=dict)


def _byte_value(element: ET.Element) -> str:
    raw = element.get("value", "")
    try:
        if raw[:1] in {"x", "X"}:
            return chr(int(raw[1:], 16))
        return chr(int(raw, 10))
    except ValueError as exc:
        raise TsFormatError(f"invalid <byte> value: {raw!r}") from exc


def _element_text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    variants = element.findall("lengthvariant")
    if variants:
        return _element_text(variants[0])
    parts = [element.text or ""]
    for child in element:
        if child.tag == "byte":
            parts.append(_byte_value(child))
        parts.append(child.tail or "")
    return "".join(parts)


def _parse_line(raw: str | None, filename: str, state: _LocationState) -> int:
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except ValueError as exc:
        raise TsFormatError(f"invalid location line {raw!r} for {filename!r}") from exc
    if raw[0] in {"+", "-"}:
        value = state.lines.get(filename, 0) + value
    state.lines[filename] = value
    return value


def _parse_location(element: ET.Element, state: _LocationState) -> Location:
    filename = element.get("filename")
    if filename is None:
        filename = state.filename
    else:
        state.filename = filename
    line = _parse_line(element.get("line"), filename, state)
    return Location(filename=filename, line=line)


def _parse_numerus(element: ET.Element) -> bool:
    raw = element.get("numerus")
    if raw is None or raw == "no":
        return False
    if raw == "yes":
        return True
    raise TsFormatError(f"invalid numerus attribute: {raw!r}")


def _parse_translation_type(element: ET.Element | None) -> str:
    if element is None:
        return TranslationType.UNFINISHED
    raw = element.get("type")
    if raw is None or raw == "":
        return TranslationType.FINISHED
    if raw not in KNOWN_TYPES:
        raise TsFormatError(f"invalid translation type: {raw!r}")
    return raw


def _parse_message(element: ET.Element, state: _LocationState) -> Message:
    source_el = element.find("source")
    if source_el is None:
        raise TsFormatError("<message> without <source>")
    numerus = _parse_numerus(element)
    translation_el = element.find("translation")
    forms: tuple[str, ...] = ()
    translation = ""
    if translation_el is not None:
        if numerus:
            forms = tuple(_element_text(nf) for nf in translation_el.findall("numerusform"))
        else:
            translation = _element_text(translation_el)
    locations = tuple(_parse_location(loc, state) for loc in element.findall("location"))
    return Message(
        source=_element_text(source_el),
        comment=_element_text(element.find("comment")),
        translation=translation,
        numerus_forms=forms,
        numerus=numerus,
        translation_type=_parse_translation_type(translation_el),
        locations=locations,
        extra_comment=_element_text(element.find("extracomment")),
        translator_comment=_element_text(element.find("translatorcomment")),
        old_source=_element_text(element.find("oldsource")),
        old_comment=_element_text(element.find("oldcomment")),
        id=element.get("id", ""),
    )


def _parse_context(element: ET.Element, state: _LocationState) -> Context:
    name_el = element.find("name")
    name = _element_text(name_el)
    if name_el is None:
        logger.debug("context without <name>; using empty name")
    messages = tuple(_parse_message(msg, state) for msg in element.findall("message"))
    return Context(name=name, messages=messages, comment=_element_text(element.find("comment")))


def _catalog_from_root(root: ET.Element) -> Catalog:
    if root.tag != "TS":
        raise TsFormatError(f"root element must be <TS>, found <{root.tag}>")
    state = _LocationState()
    contexts = tuple(_parse_context(ctx, state) for ctx in root.findall("context"))
    return Catalog(
        language=root.get("language", ""),
        version=root.get("version", ""),
        contexts=contexts,
        source_language=root.get("sourcelanguage", ""),
    )


def parse_ts_bytes(data: bytes) -> Catalog:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise TsFormatError(f"malformed XML: {exc}") from exc
    return _catalog_from_root(root)


def parse_ts_text(text: str) -> Catalog:
    return parse_ts_bytes(text.encode("utf-8"))


def parse_ts_path(path: Path) -> Catalog:
    try:
        return parse_ts_bytes(path.read_bytes())
    except TsFormatError as exc:
        raise TsFormatError(f"{path}: {exc}") from exc
