from __future__ import annotations

from dataclasses import dataclass

from tscat import ts_utils
from tscat.ts_model import Catalog


@dataclass(frozen=True)
class CatalogStats:
    language: str
    total: int
    finished: int
    unfinished: int
    untranslated: int
    obsolete: int
    numerus: int

    @property
    def active(self) -> int:
        return self.total - self.obsolete

    @property
    def percent_finished(self) -> float:
        if self.active == 0:
            return 100.0
        return 100.0 * self.finished / self.active


def catalog_stats(catalog: Catalog) -> CatalogStats:
    total = finished = unfinished = untranslated = obsolete = numerus = 0
    for _context, message in catalog.iter_messages():
        total += 1
        if message.is_obsolete:
            obsolete += 1
            continue
        if message.numerus:
            numerus += 1
        if message.is_finished:
            finished += 1
        else:
            unfinished += 1
        if not ts_utils.is_translation_non_empty(message):
            untranslated += 1
    return CatalogStats(
        language=catalog.language,
        total=total,
        finished=finished,
        unfinished=unfinished,
        untranslated=untranslated,
        obsolete=obsolete,
        numerus=numerus,
    )


def format_stats(stats: CatalogStats) -> str:
    language = stats.language or "(unknown)"
    return (
        f"{language}: {stats.finished} finished, {stats.unfinished} unfinished "
        f"({stats.untranslated} untranslated), {stats.obsolete} obsolete, "
        f"{stats.percent_finished:.1f}% done"
    )
