from __future__ import annotations

from dataclasses import dataclass, replace
import logging

from tscat.constants import TranslationType
from tscat.ts_model import Catalog, Context, Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    catalog: Catalog
    same: int
    new: int
    obsolete: int
    dropped: int
    carried_over: int


def _merge_same(old: Message, fresh: Message) -> Message:
    translation_type = old.translation_type
    translation = old.translation
    forms = old.numerus_forms
    if old.translation_type == TranslationType.VANISHED:
        translation_type = TranslationType.FINISHED
    elif old.translation_type == TranslationType.OBSOLETE:
        translation_type = TranslationType.UNFINISHED
    if old.numerus != fresh.numerus:
        translation_type = TranslationType.UNFINISHED
        if fresh.numerus:
            forms = (old.translation,) if old.translation else ()
            translation = ""
        else:
            translation = old.numerus_forms[0] if old.numerus_forms else ""
            forms = ()
    return replace(
        fresh,
        translation=translation,
        numerus_forms=forms,
        translation_type=translation_type,
        translator_comment=old.translator_comment,
    )


def _carry_over(old: Message, fresh: Message) -> Message:
    return replace(
        fresh,
        translation=old.translation if fresh.numerus == old.numerus else "",
        numerus_forms=old.numerus_forms if fresh.numerus == old.numerus else (),
        translation_type=TranslationType.UNFINISHED,
        translator_comment=old.translator_comment,
        old_comment=old.comment,
    )


def _as_new(fresh: Message) -> Message:
    return replace(
        fresh,
        translation="",
        numerus_forms=(),
        translation_type=TranslationType.UNFINISHED,
    )


def _as_vanished(old: Message) -> Message:
    if old.is_obsolete:
        return replace(old, locations=())
    if old.is_finished:
        return replace(old, translation_type=TranslationType.VANISHED, locations=())
    return replace(old, translation_type=TranslationType.OBSOLETE, locations=())


def merge_catalogs(
    existing: Catalog,
    extracted: Catalog,
    *,
    keep_obsolete: bool = True,
) -> MergeResult:
    """Merge freshly extracted messages into an existing translated catalog.

    Translations, their state and translator comments are taken from
    ``existing``; everything derived from the application source (locations,
    numerus flag, developer comments, order) is taken from ``extracted``.
    """
    same = new = obsolete = dropped = carried_over = 0
    contexts: list[Context] = []
    extracted_names = {context.name for context in extracted.contexts}

    for fresh_context in extracted.contexts:
        old_context = existing.context(fresh_context.name)
        old_messages = list(old_context.messages) if old_context is not None else []
        old_by_key = {message.key: message for message in old_messages}
        used: set[tuple[str, str]] = set()
        fresh_keys = {message.key for message in fresh_context.messages}
        messages: list[Message] = []

        for fresh in fresh_context.messages:
            old = old_by_key.get(fresh.key)
            if old is not None and fresh.key not in used:
                messages.append(_merge_same(old, fresh))
                used.add(fresh.key)
                same += 1
                continue
            similar = next(
                (
                    candidate
                    for candidate in old_messages
                    if candidate.source == fresh.source
                    and candidate.key not in used
                    and candidate.key not in fresh_keys
                ),
                None,
            )
            if similar is not None and similar.translations:
                messages.append(_carry_over(similar, fresh))
                used.add(similar.key)
                carried_over += 1
                continue
            messages.append(_as_new(fresh))
            new += 1

        for old in old_messages:
            if old.key in used:
                continue
            if keep_obsolete:
                messages.append(_as_vanished(old))
                obsolete += 1
            else:
                dropped += 1
        contexts.append(
            Context(
                name=fresh_context.name,
                messages=tuple(messages),
                comment=fresh_context.comment or (old_context.comment if old_context else ""),
            )
        )

    for old_context in existing.contexts:
        if old_context.name in extracted_names:
            continue
        if not keep_obsolete:
            dropped += len(old_context.messages)
            continue
        vanished = tuple(_as_vanished(message) for message in old_context.messages)
        obsolete += len(vanished)
        contexts.append(replace(old_context, messages=vanished))

    logger.debug(
        "merge: %d same, %d new, %d obsolete, %d dropped, %d carried over",
        same,
        new,
        obsolete,
        dropped,
        carried_over,
    )
    catalog = Catalog(
        language=existing.language or extracted.language,
        version=existing.version or extracted.version,
        contexts=tuple(contexts),
        source_language=existing.source_language or extracted.source_language,
    )
    return MergeResult(
        catalog=catalog,
        same=same,
        new=new,
        obsolete=obsolete,
        dropped=dropped,
        carried_over=carried_over,
    )
