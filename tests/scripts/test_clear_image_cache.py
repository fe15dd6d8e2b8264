import importlib.util
from pathlib import Path

import pytest

from imaging.infrastructure.cache.variant_cache import VariantCache
from imaging.infrastructure.storage.disk_store import DiskStore
from imaging.models.errors import CacheError
from imaging.models.identifiers import ImageID
from imaging.models.request import ImageRequest
from imaging.models.values import ImageFormat, ImageSize

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "clear_image_cache.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("clear_image_cache", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _fill(images_folder, make_record):
    record = make_record(format=ImageFormat.PNG)
    store = DiskStore(images_folder)
    store.save(record, b"original")

    cache = VariantCache(images_folder)
    for image_id in (record.id, ImageID.new()):
        cache.store(
            ImageRequest(id=image_id, size=ImageSize(width=50, height=50), format=ImageFormat.JPEG),
            b"variant",
        )
    return store, record


class TestClearImageCache:
    def test_clears_variants_only(self, script, images_folder, make_record) -> None:
        store, record = _fill(images_folder, make_record)

        assert script.clear_cache(["--images-folder", str(images_folder)]) == 0

        files = [p for p in images_folder.rglob("*") if p.is_file()]
        assert files == [store.path_for(record)]

    def test_defaults_to_environment(self, script, monkeypatch, images_folder, make_record) -> None:
        _fill(images_folder, make_record)
        monkeypatch.setenv("IMAGES_FOLDER_PATH", str(images_folder))

        assert script.clear_cache([]) == 0
        assert len([p for p in images_folder.rglob("*") if p.is_file()]) == 1

    def test_failure_exit_code(self, script, monkeypatch, images_folder) -> None:
        def broken(self):
            raise CacheError(message="Failed to delete cached image")

        monkeypatch.setattr(VariantCache, "clear", broken)

        assert script.clear_cache(["--images-folder", str(images_folder)]) == 1
