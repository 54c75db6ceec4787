import io

import pytest
from PIL import Image

from croppy.config import hierarchy
from croppy.config.schema import CroppyConfig
from croppy.core import Croppy
from croppy.storage.local import LocalBlobStore
from croppy.storage.memory import MemoryBlobStore


def _image_bytes(fmt: str, size=(400, 300), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep user, project and environment config out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", home / "config.yaml")
    monkeypatch.chdir(home)
    for key in hierarchy._ENV_MAP:
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture
def jpeg_bytes():
    """400x300 solid red JPEG."""
    return _image_bytes("JPEG")


@pytest.fixture
def png_bytes():
    """400x300 solid red PNG."""
    return _image_bytes("PNG")


@pytest.fixture
def config():
    return CroppyConfig()


@pytest.fixture
def memory_store(jpeg_bytes, png_bytes):
    """Memory store seeded with a couple of sources."""
    return MemoryBlobStore(
        {
            "images/cat.jpg": jpeg_bytes,
            "images/my-dog.png": png_bytes,
        }
    )


@pytest.fixture
def croppy(config, memory_store):
    """Croppy over one memory store used for both sources and derivatives."""
    instance = Croppy(config, src_store=memory_store, crops_store=memory_store)
    yield instance
    instance.close()


@pytest.fixture
def local_root(tmp_path, jpeg_bytes):
    """Directory tree with one source image."""
    (tmp_path / "images").mkdir()
    (tmp_path / "images" / "cat.jpg").write_bytes(jpeg_bytes)
    return tmp_path


@pytest.fixture
def local_croppy(local_root):
    store = LocalBlobStore(local_root)
    instance = Croppy(CroppyConfig(), src_store=store, crops_store=store)
    yield instance
    instance.close()
