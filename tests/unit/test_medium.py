"""Tests for the key-value storage media."""

import json
import os

import pytest

from mediblood.errors import StorageUnavailable
from mediblood.storage import InMemoryMedium, JsonFileMedium


class TestInMemoryMedium:

    def test_get_missing_key(self):
        assert InMemoryMedium().get_item("nope") is None

    def test_set_and_get(self):
        medium = InMemoryMedium()
        medium.set_item("k", "v")
        assert medium.get_item("k") == "v"

    def test_quota_exceeded_keeps_previous_value(self):
        medium = InMemoryMedium(quota_bytes=10)
        medium.set_item("k", "small")

        with pytest.raises(StorageUnavailable):
            medium.set_item("k", "x" * 100)

        assert medium.get_item("k") == "small"

    def test_rejects_non_string(self):
        with pytest.raises(StorageUnavailable):
            InMemoryMedium().set_item("k", {"not": "a string"})


class TestJsonFileMedium:

    def test_missing_file_reads_as_empty(self, tmp_path):
        medium = JsonFileMedium(str(tmp_path / "storage.json"))
        assert medium.get_item("k") is None

    def test_values_persist_across_instances(self, tmp_path):
        path = str(tmp_path / "nested" / "storage.json")
        JsonFileMedium(path).set_item("k", "v")

        assert JsonFileMedium(path).get_item("k") == "v"
        with open(path, encoding="utf-8") as fh:
            assert json.load(fh) == {"k": "v"}

    def test_corrupted_file_raises_on_read(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageUnavailable):
            JsonFileMedium(str(path)).get_item("k")

    def test_write_replaces_corrupted_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        medium = JsonFileMedium(str(path))

        medium.set_item("k", "v")

        assert medium.get_item("k") == "v"

    def test_quota_exceeded(self, tmp_path):
        medium = JsonFileMedium(str(tmp_path / "storage.json"), quota_bytes=16)

        with pytest.raises(StorageUnavailable):
            medium.set_item("k", "x" * 64)

        assert not os.path.exists(tmp_path / "storage.json")

    def test_no_temp_files_left_behind(self, tmp_path):
        medium = JsonFileMedium(str(tmp_path / "storage.json"))
        medium.set_item("a", "1")
        medium.set_item("b", "2")

        assert sorted(os.listdir(tmp_path)) == ["storage.json"]
