"""Tests for the generated-image directory."""

import os
from datetime import datetime, timezone

import pytest

from mcp_images.errors import NotFoundError, ValidationError
from mcp_images.storage.images import ImageStore, batch_timestamp, sanitize_filename


def _touch(store: ImageStore, name: str, data: bytes = b"img") -> str:
    path = os.path.join(store.base_dir, name)
    with open(path, "wb") as f:
        f.write(data)
    return path


class TestNaming:
    def test_sanitize_replaces_unsafe_characters(self):
        assert sanitize_filename(" Hot Dog! ") == "hot_dog_"

    def test_sanitize_keeps_alphanumerics(self):
        assert sanitize_filename("Cat42") == "cat42"

    def test_batch_timestamp_is_filename_safe(self):
        stamp = batch_timestamp(datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc))
        assert stamp == "2024-05-01T12-30-45-123Z"

    def test_repeated_words_in_one_batch_get_distinct_paths(self, store):
        stamp = batch_timestamp()
        first = store.output_path("cat", stamp, "a1b2c3d4", 1)
        second = store.output_path("cat", stamp, "a1b2c3d4", 2)
        assert first != second
        assert os.path.dirname(first) == store.base_dir
        assert os.path.basename(first).startswith(f"cat_{stamp}")


class TestListImages:
    def test_filters_to_image_extensions(self, store):
        _touch(store, "cat.png")
        _touch(store, "dog.JPG")
        _touch(store, "bird.jpeg")
        _touch(store, "notes.txt")

        names = {info.filename for info in store.list_images()}

        assert names == {"cat.png", "dog.JPG", "bird.jpeg"}

    def test_pattern_is_case_insensitive_regex(self, store):
        _touch(store, "cat_1.png")
        _touch(store, "dog_1.png")

        names = [info.filename for info in store.list_images("^CAT")]

        assert names == ["cat_1.png"]

    def test_pattern_without_matches_returns_empty_list(self, store):
        _touch(store, "cat.png")
        assert store.list_images("zebra") == []

    def test_reports_size_and_file_url(self, store):
        path = _touch(store, "cat.png", b"12345")

        (info,) = store.list_images()

        assert info.size == 5
        assert info.filepath == f"file://{path}"
        assert info.modified.tzinfo is not None

    def test_invalid_pattern_is_a_validation_error(self, store):
        with pytest.raises(ValidationError, match="Invalid pattern"):
            store.list_images("(")

    def test_creates_missing_directory(self, tmp_path):
        store = ImageStore(str(tmp_path / "fresh"))
        assert store.list_images() == []
        assert os.path.isdir(store.base_dir)


class TestDelete:
    def test_missing_file_raises_not_found(self, store):
        with pytest.raises(NotFoundError, match="Image not found: ghost.png"):
            store.delete("ghost.png")

    def test_removes_only_the_named_file(self, store):
        _touch(store, "cat.png")
        _touch(store, "dog.png")

        store.delete("cat.png")

        assert sorted(os.listdir(store.base_dir)) == ["dog.png"]

    @pytest.mark.parametrize("name", ["../secret.png", "sub/cat.png", "..", ""])
    def test_rejects_names_outside_the_directory(self, store, name):
        with pytest.raises(ValidationError):
            store.delete(name)
