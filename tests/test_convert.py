from __future__ import annotations

from pathlib import Path

import polib
import pytest

from conftest import UK_CATALOG, VI_CATALOG
from tscat import convert, ts_model
from tscat.constants import TranslationType
from tscat.ts_model import Catalog, Context, Message


def _entry(po_file: polib.POFile, msgctxt: str, msgid: str) -> polib.POEntry:
    for entry in po_file:
        if entry.msgctxt == msgctxt and entry.msgid == msgid:
            return entry
    raise AssertionError(f"missing entry {msgctxt!r} {msgid!r}")


def test_catalog_to_po_metadata() -> None:
    po_file = convert.catalog_to_po(ts_model.parse_ts_path(UK_CATALOG))
    assert po_file.metadata["Language"] == "uk_UA"
    assert po_file.metadata["Plural-Forms"].startswith("nplurals=3;")
    assert po_file.metadata["Content-Type"] == "text/plain; charset=UTF-8"


def test_catalog_to_po_entries() -> None:
    po_file = convert.catalog_to_po(ts_model.parse_ts_path(VI_CATALOG))
    finished = _entry(po_file, "QGuiApplication", "All Files (*)")
    assert finished.msgstr == "Mọi tập tin (*)"
    assert finished.occurrences == [("../utils/images.cpp", "134")]
    assert not finished.fuzzy

    draft = _entry(po_file, "QGuiApplication", "Recordings (%1)")
    assert draft.fuzzy

    untranslated = _entry(po_file, "QGuiApplication", "All Supported Files (%1)")
    assert untranslated.msgstr == ""
    assert not untranslated.fuzzy

    commented = _entry(po_file, "dialogs::SessionSettingsDialog|password", "yes")
    assert commented.msgstr == "có"


def test_numerus_forms_padded_to_language_count() -> None:
    po_file = convert.catalog_to_po(ts_model.parse_ts_path(UK_CATALOG))
    users = _entry(po_file, "UserListModel", "%n users")
    assert users.msgid_plural == "%n users"
    assert users.msgstr_plural == {0: "%n користувач", 1: "", 2: ""}


def test_po_round_trip_preserves_translations(tmp_path: Path) -> None:
    catalog = ts_model.parse_ts_path(VI_CATALOG)
    po_path = tmp_path / "drawpile_vi.po"
    convert.catalog_to_po(catalog).save(str(po_path))
    restored = convert.po_to_catalog(polib.pofile(str(po_path)))
    assert restored.language == "vi_VN"
    assert [c.name for c in restored.contexts] == [c.name for c in catalog.contexts]
    for context_name, message in catalog.iter_messages():
        other = restored.find(context_name, message.source, message.comment)
        assert other is not None
        assert other.translations == message.translations
        assert other.locations == message.locations
        assert other.numerus == message.numerus


def test_po_to_catalog_states() -> None:
    po_file = polib.POFile()
    po_file.metadata = {"Language": "uk_UA"}
    po_file.append(polib.POEntry(msgctxt="C", msgid="Done", msgstr="Готово"))
    po_file.append(polib.POEntry(msgctxt="C", msgid="Draft", msgstr="Чернетка", flags=["fuzzy"]))
    po_file.append(polib.POEntry(msgctxt="C", msgid="Empty", msgstr=""))
    po_file.append(polib.POEntry(msgctxt="C", msgid="Old", msgstr="Старе", obsolete=True))
    catalog = convert.po_to_catalog(po_file)
    context = catalog.context("C")
    assert context.find("Done").translation_type == TranslationType.FINISHED
    assert context.find("Draft").translation_type == TranslationType.UNFINISHED
    assert context.find("Empty").translation_type == TranslationType.UNFINISHED
    assert context.find("Old").translation_type == TranslationType.VANISHED


def test_obsolete_messages_become_obsolete_entries() -> None:
    catalog = Catalog(
        language="vi",
        contexts=(
            Context(
                "C",
                (Message(source="Old", translation="Cũ", translation_type=TranslationType.VANISHED),),
            ),
        ),
    )
    entry = convert.catalog_to_po(catalog)[0]
    assert entry.obsolete
    assert entry.occurrences == []


def test_convert_path_both_directions(tmp_path: Path) -> None:
    po_path = tmp_path / "libclient_uk.po"
    convert.convert_path(UK_CATALOG, po_path)
    assert po_path.exists()
    ts_path = tmp_path / "back" / "libclient_uk.ts"
    catalog = convert.convert_path(po_path, ts_path)
    assert catalog.language == "uk_UA"
    reparsed = ts_model.parse_ts_path(ts_path)
    assert reparsed.find("AvatarListModel", "No avatar").translation == "Немає аватару"
    assert reparsed.find("AnnouncementListModel", "Private").is_unfinished


def test_convert_path_rejects_unknown_suffix(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        convert.convert_path(UK_CATALOG, tmp_path / "out.json")
