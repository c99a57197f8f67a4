from __future__ import annotations

import copy
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tscat.config import Config  # noqa: E402

DATA_DIR = PROJECT_ROOT / "tests" / "data"
VI_CATALOG = DATA_DIR / "drawpile_vi.ts"
UK_CATALOG = DATA_DIR / "libclient_uk.ts"


def _deep_merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def build_config_dict(overrides: dict | None = None) -> dict:
    base = {
        "format": 1,
        "source_language": "",
        "ts_version": "2.1",
        "locations": "absolute",
        "keep_obsolete": True,
        "validation": {
            "placeholder_patterns": [r"%\d+", r"%n"],
            "check_accelerators": True,
            "check_punctuation": False,
            "fail_on": "error",
        },
    }
    if overrides:
        return _deep_merge(base, overrides)
    return base


def build_config(overrides: dict | None = None) -> Config:
    return Config.model_validate(build_config_dict(overrides))
