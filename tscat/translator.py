"""Runtime lookup over a loaded catalog.

Lookups follow the rules a Qt application applies when it installs a
translator: an exact ``(context, source, comment)`` match wins, a commented
lookup falls back to the uncommented message, and anything untranslated or
unfinished resolves to the source text itself.
"""

from __future__ import annotations

from pathlib import Path
import logging
import re

from tscat import plurals, ts_utils
from tscat.ts_model import Catalog, Message, parse_ts_path

logger = logging.getLogger(__name__)

_ARG_MARKER = re.compile(r"%(\d{1,2})")


def arg(text: str, *values: object) -> str:
    """Substitute ``%1``..``%99`` markers, lowest-numbered first."""
    result = text
    for value in values:
        numbers = [int(match.group(1)) for match in _ARG_MARKER.finditer(result)]
        numbers = [number for number in numbers if number > 0]
        if not numbers:
            logger.debug("arg(): no marker left for value %r in %r", value, text)
            break
        lowest = min(numbers)
        pattern = re.compile(rf"%{lowest}(?!\d)" if lowest < 10 else rf"%{lowest}")
        result = pattern.sub(lambda _m: str(value), result)
    return result


def _substitute_count(text: str, n: int) -> str:
    if n < 0:
        return text
    return text.replace("%n", str(n))


class Translator:
    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._index: dict[tuple[str, str, str], Message] = {}
        for context_name, message in catalog.iter_messages():
            if message.is_obsolete:
                continue
            key = (context_name, message.source, message.comment)
            if key in self._index:
                logger.debug("duplicate message %r ignored", key)
                continue
            self._index[key] = message

    @classmethod
    def from_path(cls, path: Path) -> "Translator":
        return cls(parse_ts_path(path))

    @property
    def language(self) -> str:
        return self.catalog.language

    def contexts(self) -> list[str]:
        return [context.name for context in self.catalog.contexts]

    def lookup(self, context: str, source: str, comment: str = "") -> Message | None:
        message = self._index.get((context, source, comment))
        if message is None and comment:
            message = self._index.get((context, source, ""))
        return message

    def _select(self, message: Message, n: int) -> str:
        if not message.numerus:
            return message.translation
        if not message.numerus_forms:
            return ""
        index = plurals.select_form(self.language, n if n >= 0 else 1)
        index = min(index, len(message.numerus_forms) - 1)
        return message.numerus_forms[index]

    def translate(self, context: str, source: str, comment: str = "", n: int = -1) -> str:
        message = self.lookup(context, source, comment)
        if message is None or message.is_unfinished:
            return _substitute_count(source, n)
        if not ts_utils.is_translation_non_empty(message):
            return _substitute_count(source, n)
        text = self._select(message, n)
        if not text:
            return _substitute_count(source, n)
        return _substitute_count(text, n)
