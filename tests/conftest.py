"""Pytest configuration and fixtures for image_text tests."""

import io
import threading

import pytest
from PIL import Image

from image_text.backends.base import OCRBackend, OCRError
from image_text.config import get_settings
from image_text.coordinates import NormalizedRect
from image_text.models import Fragment


def make_fragment(
    text: str,
    x: float,
    y: float,
    width: float,
    height: float,
    id: str | None = None,
) -> Fragment:
    """Fragment with a normalized, bottom-left box."""
    box = NormalizedRect(x=x, y=y, width=width, height=height)
    if id is None:
        return Fragment(text=text, box=box)
    return Fragment(id=id, text=text, box=box)


def image_bytes(
    width: int = 200,
    height: int = 100,
    color: str = "white",
    format: str = "PNG",
    exif=None,
) -> bytes:
    """Encode a solid-color image."""
    buffer = io.BytesIO()
    image = Image.new("RGB", (width, height), color)
    if exif is not None:
        image.save(buffer, format=format, exif=exif)
    else:
        image.save(buffer, format=format)
    return buffer.getvalue()


class FakeBackend(OCRBackend):
    """Backend returning canned fragments and recording its calls."""

    name = "fake"

    def __init__(self, fragments=None, error: Exception | None = None):
        self.fragments = list(fragments or [])
        self.error = error
        self.calls = []

    def recognize(self, image_bytes, orientation, language):
        self.calls.append((orientation, language))
        if self.error is not None:
            raise self.error
        return list(self.fragments)


class GatedBackend(OCRBackend):
    """Backend whose first call blocks until released; later calls return at once."""

    name = "gated"

    def __init__(self, first, second):
        self.first = first
        self.second = second
        self.release = threading.Event()
        self.first_started = threading.Event()
        self._count = 0
        self._lock = threading.Lock()

    def recognize(self, image_bytes, orientation, language):
        with self._lock:
            self._count += 1
            call = self._count

        if call == 1:
            self.first_started.set()
            if not self.release.wait(timeout=5):
                raise OCRError("gate never released")
            return list(self.first)
        return list(self.second)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temp history file and reset the settings cache."""
    monkeypatch.setenv("IMAGE_TEXT_HISTORY_PATH", str(tmp_path / "history.json"))
    monkeypatch.delenv("IMAGE_TEXT_OCR_BACKEND", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def hello_world():
    """Two words on one line with a small gap."""
    return [
        make_fragment("Hello", 0.10, 0.80, 0.15, 0.05, id="hello"),
        make_fragment("World", 0.27, 0.805, 0.15, 0.05, id="world"),
    ]


@pytest.fixture
def png_bytes():
    return image_bytes()
