"""Numerus form counts and selection rules, following Qt's language families."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PluralRule:
    name: str
    count: int
    header: str
    select: Callable[[int], int]


def _one(n: int) -> int:
    return 0


def _english(n: int) -> int:
    return 0 if n == 1 else 1


def _french(n: int) -> int:
    return 1 if n > 1 else 0


def _slavic_east(n: int) -> int:
    if n % 10 == 1 and n % 100 != 11:
        return 0
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return 1
    return 2


def _czech(n: int) -> int:
    if n == 1:
        return 0
    if 2 <= n <= 4:
        return 1
    return 2


def _polish(n: int) -> int:
    if n == 1:
        return 0
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return 1
    return 2


def _lithuanian(n: int) -> int:
    if n % 10 == 1 and n % 100 != 11:
        return 0
    if n % 10 >= 2 and (n % 100 < 10 or n % 100 >= 20):
        return 1
    return 2


def _latvian(n: int) -> int:
    if n % 10 == 1 and n % 100 != 11:
        return 0
    if n != 0:
        return 1
    return 2


def _romanian(n: int) -> int:
    if n == 1:
        return 0
    if n == 0 or 1 <= n % 100 <= 19:
        return 1
    return 2


def _slovenian(n: int) -> int:
    if n % 100 == 1:
        return 0
    if n % 100 == 2:
        return 1
    if 3 <= n % 100 <= 4:
        return 2
    return 3


def _irish(n: int) -> int:
    if n == 1:
        return 0
    if n == 2:
        return 1
    if 3 <= n <= 6:
        return 2
    if 7 <= n <= 10:
        return 3
    return 4


def _arabic(n: int) -> int:
    if n == 0:
        return 0
    if n == 1:
        return 1
    if n == 2:
        return 2
    if 3 <= n % 100 <= 10:
        return 3
    if n % 100 >= 11:
        return 4
    return 5


def _welsh(n: int) -> int:
    if n == 1:
        return 0
    if n == 2:
        return 1
    if n in (8, 11):
        return 2
    return 3


def _maltese(n: int) -> int:
    if n == 1:
        return 0
    if n == 0 or 1 <= n % 100 <= 10:
        return 1
    if 11 <= n % 100 <= 19:
        return 2
    return 3


def _last_digit_one(n: int) -> int:
    return 0 if n % 10 == 1 and n % 100 != 11 else 1


RULES: dict[str, PluralRule] = {
    rule.name: rule
    for rule in (
        PluralRule("one", 1, "nplurals=1; plural=0;", _one),
        PluralRule("english", 2, "nplurals=2; plural=(n != 1);", _english),
        PluralRule("french", 2, "nplurals=2; plural=(n > 1);", _french),
        PluralRule(
            "slavic_east",
            3,
            "nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : "
            "n%10>=2 && n%10<=4 && (n%100<12 || n%100>14) ? 1 : 2);",
            _slavic_east,
        ),
        PluralRule(
            "czech",
            3,
            "nplurals=3; plural=(n==1 ? 0 : n>=2 && n<=4 ? 1 : 2);",
            _czech,
        ),
        PluralRule(
            "polish",
            3,
            "nplurals=3; plural=(n==1 ? 0 : "
            "n%10>=2 && n%10<=4 && (n%100<12 || n%100>14) ? 1 : 2);",
            _polish,
        ),
        PluralRule(
            "lithuanian",
            3,
            "nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : "
            "n%10>=2 && (n%100<10 || n%100>=20) ? 1 : 2);",
            _lithuanian,
        ),
        PluralRule(
            "latvian",
            3,
            "nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : n != 0 ? 1 : 2);",
            _latvian,
        ),
        PluralRule(
            "romanian",
            3,
            "nplurals=3; plural=(n==1 ? 0 : (n==0 || (n%100 > 0 && n%100 < 20)) ? 1 : 2);",
            _romanian,
        ),
        PluralRule(
            "slovenian",
            4,
            "nplurals=4; plural=(n%100==1 ? 0 : n%100==2 ? 1 : "
            "n%100==3 || n%100==4 ? 2 : 3);",
            _slovenian,
        ),
        PluralRule(
            "irish",
            5,
            "nplurals=5; plural=(n==1 ? 0 : n==2 ? 1 : n<7 ? 2 : n<11 ? 3 : 4);",
            _irish,
        ),
        PluralRule(
            "arabic",
            6,
            "nplurals=6; plural=(n==0 ? 0 : n==1 ? 1 : n==2 ? 2 : "
            "n%100>=3 && n%100<=10 ? 3 : n%100>=11 ? 4 : 5);",
            _arabic,
        ),
        PluralRule(
            "welsh",
            4,
            "nplurals=4; plural=(n==1 ? 0 : n==2 ? 1 : (n != 8 && n != 11) ? 3 : 2);",
            _welsh,
        ),
        PluralRule(
            "maltese",
            4,
            "nplurals=4; plural=(n==1 ? 0 : n==0 || (n%100>0 && n%100<=10) ? 1 : "
            "(n%100>10 && n%100<20) ? 2 : 3);",
            _maltese,
        ),
        PluralRule(
            "last_digit_one",
            2,
            "nplurals=2; plural=(n%10==1 && n%100!=11 ? 0 : 1);",
            _last_digit_one,
        ),
    )
}

_FAMILIES = {
    "one": (
        "bo", "dz", "fa", "fj", "gn", "hu", "id", "ja", "jv", "km", "ko", "lo",
        "ms", "my", "na", "om", "su", "th", "tr", "tt", "vi", "yo", "za", "zh",
    ),
    "english": (
        "af", "az", "bg", "bn", "ca", "da", "de", "el", "en", "eo", "es", "et",
        "eu", "fi", "fo", "fy", "gl", "gu", "he", "hi", "it", "ka", "kk", "kn",
        "ku", "ky", "lb", "ml", "mn", "mr", "nb", "ne", "nl", "nn", "no", "pa",
        "ps", "pt", "sq", "sv", "sw", "ta", "te", "tk", "ur", "uz",
    ),
    "french": ("am", "br", "fil", "fr", "hy", "oc", "ti", "tl", "wa", "pt_br"),
    "slavic_east": ("be", "bs", "hr", "ru", "sh", "sr", "uk"),
    "czech": ("cs", "sk"),
    "polish": ("pl",),
    "lithuanian": ("lt",),
    "latvian": ("lv",),
    "romanian": ("mo", "ro"),
    "slovenian": ("sl",),
    "irish": ("ga",),
    "arabic": ("ar",),
    "welsh": ("cy",),
    "maltese": ("mt",),
    "last_digit_one": ("is", "mk"),
}

LANGUAGE_RULES: dict[str, str] = {
    code: family for family, codes in _FAMILIES.items() for code in codes
}


def _candidates(language: str) -> list[str]:
    code = language.strip().replace("-", "_").lower()
    if not code:
        return []
    primary = code.split("_", 1)[0]
    parts = code.split("_")
    candidates = [code]
    if len(parts) > 2:
        candidates.append(f"{parts[0]}_{parts[-1]}")
    candidates.append(primary)
    return candidates


def rule_for(language: str) -> PluralRule | None:
    for candidate in _candidates(language):
        family = LANGUAGE_RULES.get(candidate)
        if family is not None:
            return RULES[family]
    return None


def numerus_count(language: str) -> int | None:
    rule = rule_for(language)
    return rule.count if rule is not None else None


def select_form(language: str, n: int) -> int:
    rule = rule_for(language) or RULES["english"]
    return rule.select(abs(int(n)))


def plural_forms_header(language: str) -> str | None:
    rule = rule_for(language)
    return rule.header if rule is not None else None
