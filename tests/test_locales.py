from __future__ import annotations

import pytest

from iris_i18n import locales
from iris_i18n.locales import IndexBuildError, build_index, load_document


def test_build_index_merges_documents_per_locale(tmp_path, locale_tree):
    root = locale_tree(
        tmp_path / "locales",
        {
            "en": {"a": {"greet": "Hi"}, "b": {"bye": "Bye"}},
            "fr": {"common": {"greet": "Salut"}},
        },
    )
    index = build_index(root)
    assert index == {"en": {"greet": "Hi", "bye": "Bye"}, "fr": {"greet": "Salut"}}


def test_later_document_wins_in_lexicographic_order(tmp_path, locale_tree):
    root = locale_tree(
        tmp_path / "locales",
        {"en": {"b_second": {"greet": "Second"}, "a_first": {"greet": "First"}}},
    )
    assert build_index(root)["en"]["greet"] == "Second"


def test_malformed_document_is_skipped(tmp_path, locale_tree):
    root = locale_tree(
        tmp_path / "locales",
        {"en": {"one": {"greet": "Hi"}, "three": {"bye": "Bye"}}},
    )
    (root / "en" / "two.json").write_text("{not json", encoding="utf-8")
    assert build_index(root) == {"en": {"greet": "Hi", "bye": "Bye"}}


def test_non_object_document_is_skipped(tmp_path, json_file, locale_tree):
    root = locale_tree(tmp_path / "locales", {"en": {"ok": {"greet": "Hi"}}})
    json_file(root / "en" / "list.json", ["greet", "Hi"])
    assert build_index(root) == {"en": {"greet": "Hi"}}


def test_ignores_non_json_files_and_nested_directories(tmp_path, json_file, locale_tree):
    root = locale_tree(tmp_path / "locales", {"en": {"common": {"greet": "Hi"}}})
    (root / "en" / "notes.txt").write_text("greet=Hello", encoding="utf-8")
    json_file(root / "en" / "nested" / "deep.json", {"deep": "value"})
    (root / "README.md").write_text("docs", encoding="utf-8")
    assert build_index(root) == {"en": {"greet": "Hi"}}


def test_non_string_values_are_dropped(tmp_path, json_file):
    root = tmp_path / "locales"
    json_file(root / "en" / "common.json", {"greet": "Hi", "count": 3, "nested": {"a": "b"}})
    assert build_index(root) == {"en": {"greet": "Hi"}}


def test_empty_locale_directory_is_kept(tmp_path, locale_tree):
    root = locale_tree(tmp_path / "locales", {"en": {"common": {"greet": "Hi"}}})
    (root / "de").mkdir()
    assert build_index(root) == {"de": {}, "en": {"greet": "Hi"}}


def test_flat_locale_files_in_root_are_read_first(tmp_path, json_file, locale_tree):
    root = locale_tree(tmp_path / "locales", {"en": {"common": {"greet": "Hi"}}})
    json_file(root / "en.json", {"greet": "Flat", "only_flat": "yes"})
    json_file(root / "ja.json", {"greet": "Konnichiwa"})
    index = build_index(root)
    assert index["en"] == {"greet": "Hi", "only_flat": "yes"}
    assert index["ja"] == {"greet": "Konnichiwa"}


def test_missing_root_raises(tmp_path):
    with pytest.raises(IndexBuildError) as excinfo:
        build_index(tmp_path / "missing")
    assert excinfo.value.reason == "missing-directory"


def test_load_document_reports_reason(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("[", encoding="utf-8")
    with pytest.raises(IndexBuildError) as excinfo:
        load_document(bad)
    assert excinfo.value.reason == "malformed-document"

    with pytest.raises(IndexBuildError) as excinfo:
        load_document(tmp_path / "absent.json")
    assert excinfo.value.reason == "unreadable-entry"


def test_unreadable_document_does_not_block_other_locales(tmp_path, monkeypatch, locale_tree):
    root = locale_tree(
        tmp_path / "locales",
        {"en": {"common": {"greet": "Hi"}}, "fr": {"common": {"greet": "Salut"}}},
    )
    real_load = locales.load_document

    def flaky(path):
        if path.parent.name == "en":
            raise IndexBuildError("unreadable-entry", "denied")
        return real_load(path)

    monkeypatch.setattr(locales, "load_document", flaky)
    assert build_index(root) == {"en": {}, "fr": {"greet": "Salut"}}
