from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional
import re

from tscat.ts_model import Message

_LANG_SUFFIX = re.compile(r"_([a-z]{2,3}(?:_[A-Z][a-z]{3})?(?:_[A-Z]{2}|_\d{3})?)$")


def normalize_language(code: str) -> str:
    """Normalize ``pt-BR`` / ``pt_br`` style codes to ``pt_BR``."""
    parts = [part for part in re.split(r"[-_]", code.strip()) if part]
    if not parts:
        return ""
    normalized = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            normalized.append(part.title())
        else:
            normalized.append(part.upper())
    return "_".join(normalized)


def language_from_filename(path: Path) -> str:
    match = _LANG_SUFFIX.search(path.stem)
    if not match:
        return ""
    return match.group(1)


def is_translation_non_empty(message: Message) -> bool:
    if message.numerus:
        return any(form.strip() for form in message.numerus_forms)
    return message.translation.strip() != ""


def iter_ts_paths(
    root: Path,
    raw_paths: Optional[list[Path]],
    *,
    excluded_dirnames: Iterable[str] | None = None,
) -> list[Path]:
    roots = raw_paths if raw_paths else [root]
    seen: set[Path] = set()
    results: list[Path] = []
    excluded = set(excluded_dirnames or {".git"})

    for raw in roots:
        full = raw if raw.is_absolute() else root / raw
        if not full.exists():
            continue
        if full.is_file():
            candidates = [full]
        else:
            candidates = list(full.rglob("*.ts"))
        for candidate in candidates:
            if candidate.suffix.lower() != ".ts":
                continue
            if any(part in excluded for part in candidate.parts):
                continue
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            results.append(resolved)
    return sorted(results, key=lambda item: str(item))
