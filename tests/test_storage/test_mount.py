"""Tests for Storage, the source/derivative store pair."""

from croppy.storage.memory import MemoryBlobStore
from croppy.storage.mount import Storage


def _storage():
    src = MemoryBlobStore({"images/cat.jpg": b"src", "images/my-cat.jpg": b"src2"})
    crops = MemoryBlobStore(
        {
            "images/cat-10x10.jpg": b"1",
            "images/cat-_x20-resize.jpg": b"2",
            "images/cat-10x10.png": b"other ext",
            "images/my-cat-10x10.jpg": b"other stem",
            "images/cat.txt": b"noise",
            "thumbs/cat-10x10.jpg": b"other dir",
        }
    )
    return Storage(src, crops)


class TestStorage:
    def test_list_crops_filters_by_stem_and_extension(self):
        storage = _storage()
        assert storage.list_crops("images/cat.jpg") == [
            "images/cat-10x10.jpg",
            "images/cat-_x20-resize.jpg",
        ]

    def test_list_crops_hyphenated_stem(self):
        assert _storage().list_crops("images/my-cat.jpg") == ["images/my-cat-10x10.jpg"]

    def test_list_crops_none(self):
        assert _storage().list_crops("images/dog.jpg") == []

    def test_list_all_crops_skips_non_derivatives(self):
        keys = _storage().list_all_crops()
        assert "images/cat.txt" not in keys
        assert "thumbs/cat-10x10.jpg" in keys

    def test_src_and_crop_access(self):
        storage = _storage()
        assert storage.read_src("images/cat.jpg") == b"src"
        assert storage.src_exists("images/cat.jpg")
        assert storage.crop_exists("images/cat-10x10.jpg")
        storage.write_crop("images/cat-1x1.jpg", b"new")
        assert storage.read_crop("images/cat-1x1.jpg") == b"new"
        assert storage.delete_crop("images/cat-1x1.jpg")
        assert storage.delete_src("images/cat.jpg")
        assert not storage.src_exists("images/cat.jpg")

    def test_mount(self):
        storage = _storage().mount("images", "images/.crops")
        assert storage.read_src("cat.jpg") == b"src"
        storage.write_crop("cat-5x5.jpg", b"m")
        assert storage.list_crops("cat.jpg") == ["cat-5x5.jpg"]

    def test_local_paths(self, tmp_path):
        from croppy.storage.local import LocalBlobStore

        store = LocalBlobStore(tmp_path)
        storage = Storage(store, store)
        assert not storage.crops_are_remote()
        assert storage.local_crop_path("a/b-1x1.jpg") == tmp_path.resolve() / "a" / "b-1x1.jpg"
        assert storage.crop_url("a/b-1x1.jpg") is None

    def test_memory_has_no_local_path(self):
        assert _storage().local_crop_path("images/cat-10x10.jpg") is None
