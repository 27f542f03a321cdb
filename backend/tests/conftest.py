from __future__ import annotations
import asyncio
import io
from datetime import datetime, timedelta, timezone
import pytest
from PIL import Image
from dailyguess.errors import StorageError
from dailyguess.services.quiz import QuizService


class MemoryStore:
    """In-process KeyValueStore. Each call yields to the loop so interleavings can happen."""

    def __init__(self):
        self.hashes: dict[str, dict[str, str]] = {}
        self.strings: dict[str, str] = {}
        self.writes = 0

    async def get_hash(self, key):
        await asyncio.sleep(0)
        return dict(self.hashes.get(key, {}))

    async def set_hash_field(self, key, field, value):
        await asyncio.sleep(0)
        self.hashes.setdefault(key, {})[field] = value
        self.writes += 1

    async def get_string(self, key):
        await asyncio.sleep(0)
        return self.strings.get(key)

    async def set_string(self, key, value):
        await asyncio.sleep(0)
        self.strings[key] = value
        self.writes += 1

    async def delete(self, key):
        await asyncio.sleep(0)
        self.hashes.pop(key, None)
        self.strings.pop(key, None)

    async def set_linked(self, hash_key, field, string_key, value):
        await asyncio.sleep(0)
        self.hashes.setdefault(hash_key, {})[field] = value
        self.strings[string_key] = value
        self.writes += 1


class MemoryBlobStore:
    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.broken: set[str] = set()
        self._n = 0

    def store(self, data, content_type):
        self._n += 1
        url = f"memory://images/{self._n}"
        self.objects[url] = data
        return url

    def delete(self, url):
        if url in self.broken:
            raise StorageError(f"cannot delete {url}")
        self.objects.pop(url, None)


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_image(fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def kv():
    return MemoryStore()

@pytest.fixture
def blobs():
    return MemoryBlobStore()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def png():
    return make_image("PNG")

@pytest.fixture
def jpeg():
    return make_image("JPEG")

@pytest.fixture
def quiz(kv, blobs, clock):
    return QuizService(kv, blobs, clock=clock, id_options={"retry_delay_ms": 0})
