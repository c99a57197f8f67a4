from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, Pattern

from tscat import plurals, ts_utils
from tscat.config import Config
from tscat.constants import SEVERITY_ORDER, IssueCode, Severity
from tscat.ts_model import Catalog, Message

NUMERUS_TOKEN = "%n"

_ACCELERATOR = re.compile(r"&(?![&\s])")
_TRAILING_PUNCTUATION = ("...", "…", ":", ".", "?", "!")


@dataclass(frozen=True)
class Issue:
    severity: str
    code: str
    message: str
    context: str
    source: str
    comment: str = ""


def _issue(severity: str, code: str, text: str, context: str, message: Message) -> Issue:
    return Issue(
        severity=severity,
        code=code,
        message=text,
        context=context,
        source=message.source,
        comment=message.comment,
    )


def check_duplicate_keys(catalog: Catalog, config: Config) -> list[Issue]:
    issues: list[Issue] = []
    for context in catalog.contexts:
        seen: set[tuple[str, str]] = set()
        for message in context.messages:
            if message.key in seen:
                issues.append(
                    _issue(
                        Severity.ERROR,
                        IssueCode.DUPLICATE_KEY,
                        "source text and comment are not unique within the context",
                        context.name,
                        message,
                    )
                )
            seen.add(message.key)
    return issues


def check_numerus_count(catalog: Catalog, config: Config) -> list[Issue]:
    expected = plurals.numerus_count(catalog.language)
    if expected is None:
        return []
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        if not message.numerus or message.is_obsolete:
            continue
        if message.is_unfinished and not ts_utils.is_translation_non_empty(message):
            continue
        actual = len(message.numerus_forms)
        if actual != expected:
            issues.append(
                _issue(
                    Severity.ERROR,
                    IssueCode.NUMERUS_COUNT,
                    f"expected {expected} numerus forms for {catalog.language}, found {actual}",
                    context_name,
                    message,
                )
            )
    return issues


def check_empty_finished(catalog: Catalog, config: Config) -> list[Issue]:
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        if message.is_finished and not ts_utils.is_translation_non_empty(message):
            issues.append(
                _issue(
                    Severity.WARNING,
                    IssueCode.EMPTY_FINISHED,
                    "finished message has no translation text",
                    context_name,
                    message,
                )
            )
    return issues


def check_unfinished_translated(catalog: Catalog, config: Config) -> list[Issue]:
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        if message.is_unfinished and ts_utils.is_translation_non_empty(message):
            issues.append(
                _issue(
                    Severity.INFO,
                    IssueCode.UNFINISHED_TRANSLATED,
                    "unfinished message already carries a draft translation",
                    context_name,
                    message,
                )
            )
    return issues


def check_locations(catalog: Catalog, config: Config) -> list[Issue]:
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        for location in message.locations:
            if location.filename.strip() and location.line > 0:
                continue
            issues.append(
                _issue(
                    Severity.ERROR,
                    IssueCode.LOCATION,
                    f"malformed location {location.filename!r}:{location.line}",
                    context_name,
                    message,
                )
            )
    return issues


def _extract_tokens(text: str, pattern: Pattern[str]) -> list[str]:
    return [match.group(0) for match in pattern.finditer(text)]


def _compile_patterns(raw_patterns: Iterable[str | Pattern[str]]) -> list[Pattern[str]]:
    compiled = []
    for raw in raw_patterns:
        compiled.append(raw if isinstance(raw, re.Pattern) else re.compile(str(raw)))
    return compiled


def _tokens_match(source: str, target: str, pattern: Pattern[str], numerus: bool) -> bool:
    source_tokens = Counter(_extract_tokens(source, pattern))
    target_tokens = Counter(_extract_tokens(target, pattern))
    if numerus:
        # A numerus form may spell out the quantity instead of using %n.
        source_n = source_tokens.pop(NUMERUS_TOKEN, 0)
        target_n = target_tokens.pop(NUMERUS_TOKEN, 0)
        if target_n > source_n:
            return False
    return source_tokens == target_tokens


def check_placeholders(catalog: Catalog, config: Config) -> list[Issue]:
    patterns = _compile_patterns(config.validation.placeholder_patterns)
    if not patterns:
        return []
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        if message.is_obsolete:
            continue
        for target in message.translations:
            if not target.strip():
                continue
            if all(
                _tokens_match(message.source, target, pattern, message.numerus)
                for pattern in patterns
            ):
                continue
            issues.append(
                _issue(
                    Severity.WARNING,
                    IssueCode.PLACEHOLDERS,
                    f"placeholders differ between source and translation {target!r}",
                    context_name,
                    message,
                )
            )
            break
    return issues


def _is_rich_text(text: str) -> bool:
    return text.lstrip().lower().startswith(("<html>", "<qt>", "<!doctype html"))


def count_accelerators(text: str) -> int:
    return len(_ACCELERATOR.findall(text.replace("&&", "")))


def check_accelerators(catalog: Catalog, config: Config) -> list[Issue]:
    if not config.validation.check_accelerators:
        return []
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        if message.is_obsolete:
            continue
        if _is_rich_text(message.source):
            continue
        source_has = count_accelerators(message.source) > 0
        for target in message.translations:
            if not target.strip():
                continue
            target_count = count_accelerators(target)
            if (source_has and target_count == 1) or (not source_has and target_count == 0):
                continue
            issues.append(
                _issue(
                    Severity.WARNING,
                    IssueCode.ACCELERATOR,
                    f"accelerator mismatch in translation {target!r}",
                    context_name,
                    message,
                )
            )
            break
    return issues


def _trailing(text: str) -> str:
    stripped = text.rstrip()
    for mark in _TRAILING_PUNCTUATION:
        if stripped.endswith(mark):
            return mark
    return ""


def check_punctuation(catalog: Catalog, config: Config) -> list[Issue]:
    if not config.validation.check_punctuation:
        return []
    issues: list[Issue] = []
    for context_name, message in catalog.iter_messages():
        if message.is_obsolete:
            continue
        expected = _trailing(message.source)
        for target in message.translations:
            if not target.strip():
                continue
            actual = _trailing(target)
            if {expected, actual} <= {"...", "…"} or actual == expected:
                continue
            issues.append(
                _issue(
                    Severity.INFO,
                    IssueCode.PUNCTUATION,
                    f"ending punctuation {actual!r} differs from source {expected!r}",
                    context_name,
                    message,
                )
            )
            break
    return issues


Validator = Callable[[Catalog, Config], list[Issue]]

VALIDATORS: list[Validator] = [
    check_duplicate_keys,
    check_numerus_count,
    check_empty_finished,
    check_unfinished_translated,
    check_locations,
    check_placeholders,
    check_accelerators,
    check_punctuation,
]


def validate_catalog(catalog: Catalog, config: Config | None = None) -> list[Issue]:
    effective = config or Config()
    issues: list[Issue] = []
    for validator in VALIDATORS:
        issues.extend(validator(catalog, effective))
    return issues


def has_failures(issues: Iterable[Issue], fail_on: str = Severity.ERROR) -> bool:
    if fail_on not in SEVERITY_ORDER:
        raise ValueError(f"unsupported severity: {fail_on}")
    threshold = SEVERITY_ORDER[fail_on]
    return any(SEVERITY_ORDER[issue.severity] <= threshold for issue in issues)
