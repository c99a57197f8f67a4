from __future__ import annotations

from pathlib import Path
from typing import Literal
import hashlib
import json
import re

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from tscat import hash as tshash
from tscat.constants import (
    CONFIG_FILENAME,
    DEFAULT_PLACEHOLDER_PATTERNS,
    DEFAULT_TS_VERSION,
)

LocationMode = Literal["absolute", "relative", "none"]
FailOn = Literal["error", "warning", "info"]


def compute_canonical_hash(data: dict) -> str:
    canonical = tshash.canonical_json_bytes(data)
    return hashlib.sha256(canonical).hexdigest()


class _BaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ValidationConfig(_BaseModel):
    placeholder_patterns: list[StrictStr] = Field(
        default_factory=lambda: list(DEFAULT_PLACEHOLDER_PATTERNS)
    )
    check_accelerators: StrictBool = True
    check_punctuation: StrictBool = False
    fail_on: FailOn = "error"

    @field_validator("placeholder_patterns")
    @classmethod
    def _patterns_compile(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(
                    f"validation.placeholder_patterns: invalid pattern {pattern!r}: {exc}"
                ) from exc
        return value


class Config(_BaseModel):
    format: Literal[1] = 1
    source_language: StrictStr = ""
    ts_version: StrictStr = DEFAULT_TS_VERSION
    locations: LocationMode = "absolute"
    keep_obsolete: StrictBool = True
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    config_hash: StrictStr = ""

    def model_post_init(self, __context: object) -> None:
        self.config_hash = compute_canonical_hash(self.data)

    @property
    def data(self) -> dict:
        return self.model_dump(mode="json", exclude={"config_hash"})


def load_config(config_path: Path) -> Config:
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{config_path.name} is not valid JSON: {config_path}") from exc
    return Config.model_validate(raw)


def load_config_from_root(root: Path) -> Config:
    config_path = root / CONFIG_FILENAME
    if not config_path.exists():
        return Config()
    return load_config(config_path)
