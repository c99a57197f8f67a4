from __future__ import annotations

from pathlib import Path
import hashlib
import os
import tempfile

from tscat import locks
from tscat.constants import DEFAULT_TS_VERSION, LocationMode, TranslationType
from tscat.ts_model import Catalog, Context, Location, Message

INDENT = "    "


class CatalogChangedError(RuntimeError):
    """Raised when a catalog was modified between read and write."""


_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "'": "&apos;",
    '"': "&quot;",
}


def escape(text: str) -> str:
    """Escape text the way lupdate does, control characters as <byte>."""
    out = []
    for char in text:
        replacement = _ESCAPES.get(char)
        if replacement is not None:
            out.append(replacement)
        elif ord(char) < 0x20 and char not in "\t\n":
            out.append(f'<byte value="x{ord(char):x}"/>')
        else:
            out.append(char)
    return "".join(out)


class _LocationWriter:
    def __init__(self, mode: str) -> None:
        self.mode = mode
        self.filename: str | None = None
        self.lines: dict[str, int] = {}

    def render(self, location: Location) -> str | None:
        if self.mode == LocationMode.NONE:
            return None
        if self.mode == LocationMode.ABSOLUTE:
            return f'<location filename="{escape(location.filename)}" line="{location.line}"/>'
        attrs = []
        if location.filename != self.filename:
            attrs.append(f'filename="{escape(location.filename)}"')
            self.filename = location.filename
        delta = location.line - self.lines.get(location.filename, 0)
        self.lines[location.filename] = location.line
        attrs.append(f'line="{delta:+d}"')
        return f"<location {' '.join(attrs)}/>"


def _optional(tag: str, text: str, indent: str) -> list[str]:
    if not text:
        return []
    return [f"{indent}<{tag}>{escape(text)}</{tag}>"]


def _type_attr(message: Message) -> str:
    if message.translation_type == TranslationType.FINISHED:
        return ""
    return f' type="{message.translation_type}"'


def _render_message(message: Message, locations: _LocationWriter) -> list[str]:
    outer = INDENT
    inner = INDENT * 2
    attrs = ""
    if message.id:
        attrs += f' id="{escape(message.id)}"'
    if message.numerus:
        attrs += ' numerus="yes"'
    lines = [f"{outer}<message{attrs}>"]
    for location in message.locations:
        rendered = locations.render(location)
        if rendered is not None:
            lines.append(inner + rendered)
    lines.append(f"{inner}<source>{escape(message.source)}</source>")
    lines.extend(_optional("oldsource", message.old_source, inner))
    lines.extend(_optional("comment", message.comment, inner))
    lines.extend(_optional("oldcomment", message.old_comment, inner))
    lines.extend(_optional("extracomment", message.extra_comment, inner))
    lines.extend(_optional("translatorcomment", message.translator_comment, inner))
    type_attr = _type_attr(message)
    if message.numerus:
        forms = message.numerus_forms or ("",)
        lines.append(f"{inner}<translation{type_attr}>")
        for form in forms:
            lines.append(f"{inner}{INDENT}<numerusform>{escape(form)}</numerusform>")
        lines.append(f"{inner}</translation>")
    else:
        lines.append(f"{inner}<translation{type_attr}>{escape(message.translation)}</translation>")
    lines.append(f"{outer}</message>")
    return lines


def _render_context(context: Context, locations: _LocationWriter) -> list[str]:
    lines = ["<context>", f"{INDENT}<name>{escape(context.name)}</name>"]
    if context.comment:
        lines.append(f"{INDENT}<comment>{escape(context.comment)}</comment>")
    for message in context.messages:
        lines.extend(_render_message(message, locations))
    lines.append("</context>")
    return lines


def render_ts(
    catalog: Catalog,
    *,
    locations: str = LocationMode.ABSOLUTE,
    version: str | None = None,
) -> str:
    if locations not in {LocationMode.ABSOLUTE, LocationMode.RELATIVE, LocationMode.NONE}:
        raise ValueError(f"unsupported location mode: {locations}")
    ts_version = version or catalog.version or DEFAULT_TS_VERSION
    root_attrs = f'version="{escape(ts_version)}"'
    if catalog.language:
        root_attrs += f' language="{escape(catalog.language)}"'
    if catalog.source_language:
        root_attrs += f' sourcelanguage="{escape(catalog.source_language)}"'
    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        "<!DOCTYPE TS>",
        f"<TS {root_attrs}>",
    ]
    location_writer = _LocationWriter(locations)
    for context in catalog.contexts:
        lines.extend(_render_context(context, location_writer))
    lines.append("</TS>")
    return "\n".join(lines) + "\n"


def render_ts_bytes(catalog: Catalog, **kwargs) -> bytes:
    return render_ts(catalog, **kwargs).encode("utf-8")


def _fsync_file(path: Path) -> None:
    with open(path, "rb") as handle:
        os.fsync(handle.fileno())


def save_ts(
    catalog: Catalog,
    path: Path,
    *,
    locations: str = LocationMode.ABSOLUTE,
    version: str | None = None,
    lock_path: Path | None = None,
    expected_sha256: str | None = None,
) -> None:
    """Atomically replace ``path`` with the rendered catalog.

    When ``expected_sha256`` is given the file must still have that digest once
    the lock is held, otherwise ``CatalogChangedError`` is raised and nothing
    is written.
    """
    data = render_ts_bytes(catalog, locations=locations, version=version)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_handle = tempfile.NamedTemporaryFile(
        dir=str(path.parent),
        suffix=".ts",
        delete=False,
    )
    tmp_name = tmp_handle.name
    try:
        tmp_handle.write(data)
        tmp_handle.close()
        _fsync_file(Path(tmp_name))
        with locks.acquire_file_lock(lock_path or locks.catalog_lock_path(path)):
            if expected_sha256 is not None and path.exists():
                current_sha = hashlib.sha256(path.read_bytes()).hexdigest()
                if current_sha != expected_sha256:
                    raise CatalogChangedError(f"{path}: file changed since it was read")
            os.replace(tmp_name, path)
    finally:
        tmp_handle.close()
        if Path(tmp_name).exists():
            os.unlink(tmp_name)
