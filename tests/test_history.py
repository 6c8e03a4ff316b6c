"""Tests for the persisted scan history."""

import json

import pytest

from image_text.history import HistoryStore


@pytest.mark.unit
class TestHistoryStore:
    """Tests for HistoryStore."""

    def test_starts_empty_without_file(self, tmp_path):
        store = HistoryStore(tmp_path / "missing" / "history.json")

        assert store.items == []
        assert len(store) == 0

    def test_add_newest_first(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json")
        store.add("first")
        store.add("second")

        assert [item.text for item in store.items] == ["second", "first"]

    def test_evicts_oldest_beyond_limit(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json")
        for index in range(55):
            store.add(f"text {index}")

        texts = [item.text for item in store.items]
        assert len(texts) == 50
        assert texts[0] == "text 54"
        assert texts[-1] == "text 5"

    def test_custom_limit(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json", limit=2)
        for text in ("a", "b", "c"):
            store.add(text)

        assert [item.text for item in store.items] == ["c", "b"]

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "history.json"
        added = HistoryStore(path).add("Hello World")

        reloaded = HistoryStore(path).items

        assert len(reloaded) == 1
        assert reloaded[0].id == added.id
        assert reloaded[0].text == "Hello World"
        assert reloaded[0].timestamp == added.timestamp

    def test_file_format(self, tmp_path):
        path = tmp_path / "history.json"
        HistoryStore(path).add("héllo")

        records = json.loads(path.read_text(encoding="utf-8"))

        assert len(records) == 1
        assert set(records[0]) == {"id", "timestamp", "text"}
        assert records[0]["text"] == "héllo"

    def test_delete(self, tmp_path):
        path = tmp_path / "history.json"
        store = HistoryStore(path)
        for text in ("a", "b", "c", "d"):
            store.add(text)

        store.delete([0, 2])

        assert [item.text for item in store.items] == ["c", "a"]
        assert [item.text for item in HistoryStore(path).items] == ["c", "a"]

    def test_clear(self, tmp_path):
        path = tmp_path / "history.json"
        store = HistoryStore(path)
        store.add("a")

        store.clear()

        assert store.items == []
        assert json.loads(path.read_text()) == []

    def test_corrupt_file_loads_empty(self, tmp_path, caplog):
        path = tmp_path / "history.json"
        path.write_text("{not json")

        store = HistoryStore(path)

        assert store.items == []
        assert "Ignoring unreadable history file" in caplog.text

    def test_items_is_a_copy(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json")
        store.add("a")

        store.items.clear()

        assert len(store) == 1
