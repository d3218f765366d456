import pytest

from helpers import FakeLoader, make_jpeg, make_png


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch):
    for name in (
        "GLTF_IMPORT_ALLOW_LOCAL_FILES",
        "GLTF_IMPORT_HTTP_TIMEOUT",
        "GLTF_IMPORT_USER_AGENT",
        "GLTF_IMPORT_MAX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def fake_loader() -> FakeLoader:
    return FakeLoader()
