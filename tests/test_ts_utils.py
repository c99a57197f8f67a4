from __future__ import annotations

from pathlib import Path

from tscat import ts_utils
from tscat.ts_model import Message


def test_language_from_filename() -> None:
    assert ts_utils.language_from_filename(Path("drawpile_vi.ts")) == "vi"
    assert ts_utils.language_from_filename(Path("libclient_uk.ts")) == "uk"
    assert ts_utils.language_from_filename(Path("app_pt_BR.ts")) == "pt_BR"
    assert ts_utils.language_from_filename(Path("my_app_de.ts")) == "de"
    assert ts_utils.language_from_filename(Path("catalog.ts")) == ""


def test_normalize_language() -> None:
    assert ts_utils.normalize_language("pt-br") == "pt_BR"
    assert ts_utils.normalize_language("zh-hans-cn") == "zh_Hans_CN"
    assert ts_utils.normalize_language("VI") == "vi"
    assert ts_utils.normalize_language("") == ""


def test_is_translation_non_empty() -> None:
    assert ts_utils.is_translation_non_empty(Message(source="a", translation="b"))
    assert not ts_utils.is_translation_non_empty(Message(source="a", translation="  "))
    assert ts_utils.is_translation_non_empty(
        Message(source="%n", numerus=True, numerus_forms=("", "x"))
    )
    assert not ts_utils.is_translation_non_empty(
        Message(source="%n", numerus=True, numerus_forms=("",))
    )


def test_iter_ts_paths(tmp_path: Path) -> None:
    (tmp_path / "i18n").mkdir()
    (tmp_path / "i18n" / "app_vi.ts").write_text("", encoding="utf-8")
    (tmp_path / "i18n" / "app_uk.ts").write_text("", encoding="utf-8")
    (tmp_path / "i18n" / "notes.txt").write_text("", encoding="utf-8")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "stale_de.ts").write_text("", encoding="utf-8")

    found = ts_utils.iter_ts_paths(tmp_path, None)
    assert [path.name for path in found] == ["app_uk.ts", "app_vi.ts"]

    explicit = ts_utils.iter_ts_paths(
        tmp_path,
        [Path("i18n/app_vi.ts"), tmp_path / "i18n" / "app_vi.ts", Path("missing.ts")],
    )
    assert [path.name for path in explicit] == ["app_vi.ts"]
