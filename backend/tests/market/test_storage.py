"""Tests for key/value stores."""

import json

from nova.market.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    create_store,
)


class TestInMemoryKeyValueStore:
    """Unit tests for the in-memory store."""

    def test_get_absent(self):
        """Test that unknown keys return None."""
        assert InMemoryKeyValueStore().get("missing") is None

    def test_set_and_get(self):
        """Test storing and reading a value."""
        store = InMemoryKeyValueStore()
        store.set("k", "v")
        assert store.get("k") == "v"
        assert "k" in store

    def test_initial_values_copied(self):
        """Test that the initial mapping is copied, not shared."""
        initial = {"k": "v"}
        store = InMemoryKeyValueStore(initial)
        store.set("k", "other")
        assert initial["k"] == "v"

    def test_delete(self):
        """Test that delete() removes a key and ignores unknown keys."""
        store = InMemoryKeyValueStore({"k": "v"})
        store.delete("k")
        store.delete("missing")
        assert store.get("k") is None
        assert "k" not in store


class TestJsonFileKeyValueStore:
    """Unit tests for the JSON file store."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test that a missing file reads as an empty store."""
        store = JsonFileKeyValueStore(tmp_path / "prefs.json")
        assert store.get("anything") is None

    def test_set_writes_file(self, tmp_path):
        """Test that set() persists the whole object to disk."""
        path = tmp_path / "prefs.json"
        store = JsonFileKeyValueStore(path)
        store.set("theme", "dark")
        store.set("currency", "eur")
        assert json.loads(path.read_text()) == {"currency": "eur", "theme": "dark"}

    def test_round_trip(self, tmp_path):
        """Test that a new store reads what an old one wrote."""
        path = tmp_path / "prefs.json"
        JsonFileKeyValueStore(path).set("theme", "dark")
        assert JsonFileKeyValueStore(path).get("theme") == "dark"

    def test_delete_rewrites_file(self, tmp_path):
        """Test that delete() drops the key on disk."""
        path = tmp_path / "prefs.json"
        store = JsonFileKeyValueStore(path)
        store.set("theme", "dark")
        store.set("currency", "eur")
        store.delete("theme")
        assert json.loads(path.read_text()) == {"currency": "eur"}
        assert JsonFileKeyValueStore(path).get("theme") is None

    def test_delete_missing_key_does_not_write(self, tmp_path):
        """Deleting an absent key leaves a missing file missing."""
        path = tmp_path / "prefs.json"
        JsonFileKeyValueStore(path).delete("theme")
        assert not path.exists()

    def test_creates_parent_directories(self, tmp_path):
        """Test writing below a directory that does not exist yet."""
        path = tmp_path / "nested" / "dir" / "prefs.json"
        JsonFileKeyValueStore(path).set("theme", "dark")
        assert path.exists()

    def test_no_temp_file_left_behind(self, tmp_path):
        """Test that the atomic write cleans up after itself."""
        path = tmp_path / "prefs.json"
        JsonFileKeyValueStore(path).set("theme", "dark")
        assert [p.name for p in tmp_path.iterdir()] == ["prefs.json"]

    def test_corrupt_file_is_empty(self, tmp_path):
        """A file that is not JSON is treated as empty, not an error."""
        path = tmp_path / "prefs.json"
        path.write_text("{{{ not json")
        store = JsonFileKeyValueStore(path)
        assert store.get("theme") is None
        store.set("theme", "dark")
        assert JsonFileKeyValueStore(path).get("theme") == "dark"

    def test_non_object_file_is_empty(self, tmp_path):
        """A JSON document that is not an object is treated as empty."""
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2, 3]")
        assert JsonFileKeyValueStore(path).get("0") is None

    def test_non_string_values_ignored(self, tmp_path):
        """Only string values are loaded from disk."""
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({"theme": "dark", "count": 3}))
        store = JsonFileKeyValueStore(path)
        assert store.get("theme") == "dark"
        assert store.get("count") is None


class TestCreateStore:
    """Tests for create_store."""

    def test_in_memory_without_path(self):
        assert isinstance(create_store(None), InMemoryKeyValueStore)

    def test_file_with_path(self, tmp_path):
        store = create_store(str(tmp_path / "prefs.json"))
        assert isinstance(store, JsonFileKeyValueStore)
        assert store.path == tmp_path / "prefs.json"
