"""
Tests for the JSON export store.
"""

import json

import pytest

from formmatch.storage import (
    build_export,
    load_store,
    save_store,
    statistics_from_export,
    stored_forms_from_export,
)
from pipelines.matching.descriptors import FieldDescriptor


class TestLoadSave:
    """Test reading and writing store files."""

    def test_missing_file_gives_empty_store(self, tmp_path):
        assert load_store(tmp_path / "missing.json") == {"formData": {}, "statistics": {}}

    def test_blank_or_corrupt_file_gives_empty_store(self, tmp_path):
        blank = tmp_path / "blank.json"
        blank.write_text("  ")
        corrupt = tmp_path / "corrupt.json"
        corrupt.write_text("{not json")
        assert load_store(blank)["formData"] == {}
        assert load_store(corrupt)["formData"] == {}

    def test_strict_load_rejects_corrupt_file(self, tmp_path):
        corrupt = tmp_path / "corrupt.json"
        corrupt.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_store(corrupt, strict=True)

    def test_strict_load_still_accepts_missing_file(self, tmp_path):
        assert load_store(tmp_path / "missing.json", strict=True)["formData"] == {}

    def test_save_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "export.json"
        save_store(path, {"formData": {}, "statistics": {"formsFilled": 2}})
        assert json.loads(path.read_text())["statistics"]["formsFilled"] == 2


class TestExportDocument:
    """Test conversion between descriptors and export documents."""

    def test_build_export(self):
        field = FieldDescriptor(id="email", type="email", label="Email", name="email", css_class="wide", value="a@b.com")
        document = build_export(
            {"shop.example.com": {"checkout": [field]}},
            {"forms_detected": 2, "fields_learned": 5, "last_used": "2026-01-01T00:00:00"},
        )
        record = document["formData"]["shop.example.com"]["checkout"][0]
        assert record["class"] == "wide"
        assert set(record) == {"id", "type", "label", "name", "placeholder", "class", "value"}
        assert document["statistics"] == {"formsDetected": 2, "fieldsLearned": 5, "lastUsed": "2026-01-01T00:00:00"}
        assert "exportDate" in document

    def test_stored_forms_skip_invalid_records(self, export_document):
        forms, skipped = stored_forms_from_export(export_document)
        assert skipped == 1
        fields = forms["shop.example.com"]["checkout"]
        assert [f.name for f in fields] == ["email"]
        assert fields[0].value == "ada@example.com"

    def test_export_round_trip(self):
        field = FieldDescriptor(id="zip", type="text", label="Postcode", name="zip", value="SW1A 1AA")
        document = build_export({"a.example.com": {"addr": [field]}}, {})
        forms, skipped = stored_forms_from_export(document)
        assert skipped == 0
        assert forms["a.example.com"]["addr"] == [field]

    def test_statistics_from_export(self, export_document):
        assert statistics_from_export(export_document) == {
            "forms_detected": 3,
            "forms_filled": 1,
            "fields_learned": 7,
        }
