from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from conftest import UK_CATALOG, VI_CATALOG
from tscat import locks, ts_model, ts_writer
from tscat.constants import TranslationType
from tscat.ts_model import Catalog, Context, Location, Message


@pytest.mark.parametrize("fixture", [VI_CATALOG, UK_CATALOG])
def test_render_reproduces_lupdate_output(fixture: Path) -> None:
    original = fixture.read_text(encoding="utf-8")
    catalog = ts_model.parse_ts_text(original)
    assert ts_writer.render_ts(catalog) == original


def test_escape_entities_round_trip() -> None:
    text = "Tom & Jerry's \"<b>show</b>\""
    escaped = ts_writer.escape(text)
    assert escaped == "Tom &amp; Jerry&apos;s &quot;&lt;b&gt;show&lt;/b&gt;&quot;"
    catalog = Catalog(
        language="vi_VN",
        version="2.1",
        contexts=(Context(name="C", messages=(Message(source=text, translation=text),)),),
    )
    parsed = ts_model.parse_ts_text(ts_writer.render_ts(catalog))
    assert parsed.find("C", text).translation == text


def test_control_characters_written_as_byte() -> None:
    assert ts_writer.escape("a\x1bb") == 'a<byte value="x1b"/>b'
    catalog = Catalog(
        language="en",
        contexts=(Context(name="C", messages=(Message(source="a\x1bb"),)),),
    )
    parsed = ts_model.parse_ts_text(ts_writer.render_ts(catalog))
    assert parsed.contexts[0].messages[0].source == "a\x1bb"


def test_carriage_returns_survive_round_trip() -> None:
    assert ts_writer.escape("a\rb") == 'a<byte value="xd"/>b'
    message = Message(source="line1\r\nline2", translation="a\rb")
    catalog = Catalog(language="vi_VN", contexts=(Context(name="C", messages=(message,)),))
    parsed = ts_model.parse_ts_text(ts_writer.render_ts(catalog)).contexts[0].messages[0]
    assert (parsed.source, parsed.translation) == ("line1\r\nline2", "a\rb")


def _located_catalog() -> Catalog:
    messages = (
        Message(
            source="One",
            translation="Mot",
            locations=(Location("a.cpp", 10), Location("a.cpp", 15)),
        ),
        Message(
            source="Two",
            translation="Hai",
            locations=(Location("b.cpp", 3), Location("a.cpp", 13)),
        ),
    )
    return Catalog(language="vi_VN", version="2.1", contexts=(Context("Ctx", messages),))


def test_relative_locations_round_trip() -> None:
    catalog = _located_catalog()
    rendered = ts_writer.render_ts(catalog, locations="relative")
    assert '<location filename="a.cpp" line="+10"/>' in rendered
    assert '<location line="+5"/>' in rendered
    assert '<location filename="a.cpp" line="-2"/>' in rendered
    assert ts_model.parse_ts_text(rendered) == catalog


def test_no_locations_mode() -> None:
    rendered = ts_writer.render_ts(_located_catalog(), locations="none")
    assert "<location" not in rendered


def test_unknown_location_mode_rejected() -> None:
    with pytest.raises(ValueError):
        ts_writer.render_ts(_located_catalog(), locations="sometimes")


def test_numerus_without_forms_writes_empty_form() -> None:
    catalog = Catalog(
        language="uk_UA",
        contexts=(
            Context(
                "C",
                (
                    Message(
                        source="%n files",
                        numerus=True,
                        translation_type=TranslationType.UNFINISHED,
                    ),
                ),
            ),
        ),
    )
    rendered = ts_writer.render_ts(catalog)
    assert '<message numerus="yes">' in rendered
    assert '<translation type="unfinished">' in rendered
    assert "<numerusform></numerusform>" in rendered


def test_optional_fields_written_in_order() -> None:
    message = Message(
        source="Open",
        comment="menu",
        old_source="Open file",
        extra_comment="File menu entry",
        translator_comment="short form",
        translation="Mở",
        id="file.open",
    )
    rendered = ts_writer.render_ts(Catalog(language="vi", contexts=(Context("C", (message,)),)))
    order = [
        rendered.index(tag)
        for tag in ("<source>", "<oldsource>", "<comment>", "<extracomment>", "<translatorcomment>", "<translation>")
    ]
    assert order == sorted(order)
    assert '<message id="file.open">' in rendered
    assert ts_model.parse_ts_text(rendered).contexts[0].messages[0] == message


def test_save_ts_writes_atomically(tmp_path: Path) -> None:
    catalog = ts_model.parse_ts_path(VI_CATALOG)
    target = tmp_path / "out" / "drawpile_vi.ts"
    ts_writer.save_ts(catalog, target)
    assert target.read_text(encoding="utf-8") == VI_CATALOG.read_text(encoding="utf-8")
    assert [p.name for p in target.parent.iterdir() if p.suffix == ".ts"] == ["drawpile_vi.ts"]
    assert locks.catalog_lock_path(target).exists()


def test_save_ts_refuses_changed_file(tmp_path: Path) -> None:
    target = tmp_path / "drawpile_vi.ts"
    target.write_bytes(VI_CATALOG.read_bytes())
    stale = hashlib.sha256(b"something else").hexdigest()
    catalog = ts_model.parse_ts_path(target)
    with pytest.raises(ts_writer.CatalogChangedError):
        ts_writer.save_ts(catalog, target, locations="none", expected_sha256=stale)
    assert target.read_bytes() == VI_CATALOG.read_bytes()
