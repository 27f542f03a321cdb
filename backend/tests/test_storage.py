from __future__ import annotations
from unittest.mock import MagicMock
import pytest
from minio.error import ServerError
from dailyguess.errors import StorageError
from dailyguess.services.challenges import ChallengeStore
from dailyguess.services.media import ext_for_mime, sniff_mime
from dailyguess.services.storage import MinioBlobStore


@pytest.fixture
def client():
    c = MagicMock()
    c.bucket_exists.return_value = False
    return c

@pytest.fixture
def blob_store(client):
    return MinioBlobStore(client, bucket="quiz", public_url="http://cdn.local/")


def test_bucket_created_when_missing(client, blob_store):
    client.make_bucket.assert_called_once_with("quiz")


def test_store_puts_object_and_returns_public_url(client, blob_store, png):
    url = blob_store.store(png, "image/png")
    assert url.startswith("http://cdn.local/quiz/challenges/") and url.endswith(".png")
    args, kwargs = client.put_object.call_args
    assert args[0] == "quiz"
    assert args[1] == url[len("http://cdn.local/quiz/"):]
    assert kwargs["length"] == len(png) and kwargs["content_type"] == "image/png"


def test_delete_maps_url_back_to_key(client, blob_store):
    blob_store.delete("http://cdn.local/quiz/challenges/abc.jpg")
    client.remove_object.assert_called_once_with("quiz", "challenges/abc.jpg")


def test_delete_foreign_url_is_a_storage_error(client, blob_store):
    with pytest.raises(StorageError):
        blob_store.delete("http://elsewhere/other/abc.jpg")
    client.remove_object.assert_not_called()


def test_sniff_mime(png, jpeg):
    assert sniff_mime(png) == "image/png"
    assert sniff_mime(jpeg) == "image/jpeg"
    assert sniff_mime(b"GIF? no") is None
    assert sniff_mime(b"") is None


def test_ext_for_mime():
    assert ext_for_mime("image/jpeg") == "jpg"
    assert ext_for_mime("application/pdf") == "bin"


def test_provider_server_error_becomes_storage_error(client, blob_store):
    client.remove_object.side_effect = ServerError("503 from provider", 503)
    with pytest.raises(StorageError):
        blob_store.delete("http://cdn.local/quiz/challenges/abc.jpg")


@pytest.mark.asyncio
async def test_erase_all_continues_past_provider_outage(client, blob_store, kv, png):
    client.remove_object.side_effect = ServerError("503 from provider", 503)
    store = ChallengeStore(kv, blob_store)
    await store.create(png, ["a"])
    await store.create(png, ["b"])
    await store.erase_all()
    assert client.remove_object.call_count == 2
    assert await store.current() is None
    assert await store.list() == []
