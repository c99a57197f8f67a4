"""Conversion between TS catalogs and gettext PO files."""

from __future__ import annotations

from pathlib import Path
import logging

import polib

from tscat import plurals, ts_utils
from tscat.constants import DEFAULT_TS_VERSION, TranslationType
from tscat.ts_model import Catalog, Context, Location, Message, parse_ts_path
from tscat.ts_writer import save_ts

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "|"
FUZZY_FLAG = "fuzzy"


def _msgctxt(context: str, comment: str) -> str:
    if comment:
        return f"{context}{CONTEXT_SEPARATOR}{comment}"
    return context


def _split_msgctxt(msgctxt: str | None) -> tuple[str, str]:
    if not msgctxt:
        return "", ""
    context, sep, comment = msgctxt.partition(CONTEXT_SEPARATOR)
    return context, comment if sep else ""


def _po_metadata(catalog: Catalog) -> dict[str, str]:
    metadata = {
        "MIME-Version": "1.0",
        "Content-Type": "text/plain; charset=UTF-8",
        "Content-Transfer-Encoding": "8bit",
        "X-Qt-Contexts": "true",
    }
    if catalog.language:
        metadata["Language"] = catalog.language
    header = plurals.plural_forms_header(catalog.language)
    if header:
        metadata["Plural-Forms"] = header
    return metadata


def _message_to_entry(context: str, message: Message, nplurals: int | None) -> polib.POEntry:
    flags = []
    draft = message.translation_type in {TranslationType.UNFINISHED, TranslationType.OBSOLETE}
    if draft and ts_utils.is_translation_non_empty(message):
        flags.append(FUZZY_FLAG)
    entry = polib.POEntry(
        msgctxt=_msgctxt(context, message.comment) or None,
        msgid=message.source,
        comment=message.extra_comment,
        tcomment=message.translator_comment,
        flags=flags,
        obsolete=message.is_obsolete,
    )
    if not message.is_obsolete:
        entry.occurrences = [
            (location.filename, str(location.line) if location.line > 0 else "")
            for location in message.locations
        ]
    if message.numerus:
        entry.msgid_plural = message.source
        count = max(nplurals or 0, len(message.numerus_forms), 1)
        forms = list(message.numerus_forms) + [""] * (count - len(message.numerus_forms))
        entry.msgstr_plural = {index: form for index, form in enumerate(forms)}
    else:
        entry.msgstr = message.translation
    return entry


def catalog_to_po(catalog: Catalog) -> polib.POFile:
    po_file = polib.POFile()
    po_file.metadata = _po_metadata(catalog)
    nplurals = plurals.numerus_count(catalog.language)
    for context_name, message in catalog.iter_messages():
        po_file.append(_message_to_entry(context_name, message, nplurals))
    return po_file


def _entry_locations(entry: polib.POEntry) -> tuple[Location, ...]:
    locations = []
    for filename, line in entry.occurrences:
        try:
            line_number = int(line) if line else 0
        except ValueError:
            logger.debug("ignoring non-numeric occurrence line %r for %s", line, filename)
            line_number = 0
        locations.append(Location(filename=filename, line=line_number))
    return tuple(locations)


def _entry_type(entry: polib.POEntry, has_text: bool) -> str:
    if entry.obsolete:
        return TranslationType.VANISHED if has_text and not entry.fuzzy else TranslationType.OBSOLETE
    if not has_text or entry.fuzzy:
        return TranslationType.UNFINISHED
    return TranslationType.FINISHED


def _entry_to_message(entry: polib.POEntry) -> tuple[str, Message]:
    context, comment = _split_msgctxt(entry.msgctxt)
    numerus = bool(entry.msgid_plural)
    forms: tuple[str, ...] = ()
    translation = ""
    if numerus:
        ordered = sorted(entry.msgstr_plural.items(), key=lambda item: int(item[0]))
        forms = tuple(str(value) for _, value in ordered)
        has_text = any(form.strip() for form in forms)
    else:
        translation = entry.msgstr or ""
        has_text = translation.strip() != ""
    message = Message(
        source=entry.msgid,
        comment=comment,
        translation=translation,
        numerus_forms=forms,
        numerus=numerus,
        translation_type=_entry_type(entry, has_text),
        locations=_entry_locations(entry),
        extra_comment=entry.comment or "",
        translator_comment=entry.tcomment or "",
    )
    return context, message


def po_to_catalog(po_file: polib.POFile, *, language: str | None = None) -> Catalog:
    grouped: dict[str, list[Message]] = {}
    for entry in po_file:
        if entry.msgid == "" and not entry.msgctxt:
            continue
        context, message = _entry_to_message(entry)
        grouped.setdefault(context, []).append(message)
    resolved_language = language or po_file.metadata.get("Language", "")
    contexts = tuple(Context(name=name, messages=tuple(messages)) for name, messages in grouped.items())
    return Catalog(language=resolved_language, version=DEFAULT_TS_VERSION, contexts=contexts)


def convert_path(src: Path, dst: Path, *, locations: str = "absolute") -> Catalog:
    src_suffix = src.suffix.lower()
    dst_suffix = dst.suffix.lower()
    if src_suffix == ".ts" and dst_suffix in {".po", ".pot"}:
        catalog = parse_ts_path(src)
        po_file = catalog_to_po(catalog)
        dst.parent.mkdir(parents=True, exist_ok=True)
        po_file.save(str(dst))
        return catalog
    if src_suffix in {".po", ".pot"} and dst_suffix == ".ts":
        language = ts_utils.language_from_filename(dst) or None
        po_file = polib.pofile(str(src))
        catalog = po_to_catalog(po_file, language=po_file.metadata.get("Language") or language)
        save_ts(catalog, dst, locations=locations)
        return catalog
    raise ValueError(f"unsupported conversion: {src.name} -> {dst.name}")
