"""Credential persistence."""

import json
import stat

import pytest

from ghostwrite.credentials import FileCredentialStore, MemoryCredentialStore

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_missing_file_means_no_credential(tmp_path):
    store = FileCredentialStore(tmp_path / "nested" / "credentials.json")

    assert await store.load() is None


@pytest.mark.asyncio
async def test_save_then_load_survives_new_instance(tmp_path):
    path = tmp_path / "nested" / "credentials.json"
    await FileCredentialStore(path).save("gw_secret")

    assert await FileCredentialStore(path).load() == "gw_secret"
    assert json.loads(path.read_text()) == {"apiKey": "gw_secret"}


@pytest.mark.asyncio
async def test_saved_file_is_private(tmp_path):
    path = tmp_path / "credentials.json"
    await FileCredentialStore(path).save("gw_secret")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


@pytest.mark.asyncio
async def test_clear_removes_file(tmp_path):
    path = tmp_path / "credentials.json"
    store = FileCredentialStore(path)
    await store.save("gw_secret")

    await store.clear()
    await store.clear()

    assert not path.exists()
    assert await store.load() is None


@pytest.mark.asyncio
async def test_unexpected_document_shape_means_no_credential(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"apiKey": 123}))

    assert await FileCredentialStore(path).load() is None


@pytest.mark.asyncio
async def test_corrupt_file_raises(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json")

    with pytest.raises(ValueError):
        await FileCredentialStore(path).load()


@pytest.mark.asyncio
async def test_memory_store_roundtrip():
    store = MemoryCredentialStore()
    await store.save("k")
    assert await store.load() == "k"
    await store.clear()
    assert await store.load() is None
