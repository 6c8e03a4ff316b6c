"""Tests for ScanSession: background scans, failures and last-result-wins."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import FakeBackend, GatedBackend, image_bytes, make_fragment
from image_text.backends.base import OCRError
from image_text.coordinates import Point, Size
from image_text.orientation import DisplayOrientation, ImageOrientation
from image_text.session import ScanSession


@pytest.mark.unit
class TestScanSession:
    """Tests for the scan lifecycle."""

    def test_scan_groups_fragments(self, hello_world, png_bytes):
        backend = FakeBackend(hello_world)
        with ScanSession(backend) as session:
            session.select_image(png_bytes)
            result = session.scan()

            assert result.error is None
            assert len(result.fragments) == 2
            assert result.image_size == Size(200, 100)
            assert [g.combined_text for g in session.groups] == ["Hello World"]
            assert session.copy_all_text() == "Hello World"
            assert backend.calls == [(ImageOrientation.UP, "en-US")]

    def test_failure_becomes_empty_result(self, png_bytes, caplog):
        backend = FakeBackend(error=OCRError("engine crashed"))
        with ScanSession(backend) as session:
            session.select_image(png_bytes)
            result = session.scan()

            assert result.is_empty
            assert result.error == "engine crashed"
            assert session.groups == []
            assert session.copy_all_text() == ""
            assert "OCR failed" in caplog.text

    def test_no_text_detected(self, png_bytes):
        with ScanSession(FakeBackend([])) as session:
            session.select_image(png_bytes)
            result = session.scan()

            assert result.is_empty
            assert result.error is None
            assert session.groups == []

    def test_scan_without_image(self):
        with ScanSession(FakeBackend()) as session:
            with pytest.raises(RuntimeError, match="No image selected"):
                session.start_scan()

    def test_unreadable_image(self):
        with ScanSession(FakeBackend()) as session:
            with pytest.raises(ValueError, match="Failed to read image"):
                session.select_image(b"not an image")

    def test_select_image_clears_result(self, hello_world, png_bytes):
        with ScanSession(FakeBackend(hello_world)) as session:
            session.select_image(png_bytes)
            session.scan()
            assert session.groups

            session.select_image(png_bytes)

            assert session.result is None
            assert session.groups == []

    def test_rotated_orientation_swaps_size(self, png_bytes):
        backend = FakeBackend([])
        with ScanSession(backend) as session:
            session.select_image(png_bytes, orientation=DisplayOrientation.RIGHT)
            session.scan()

            assert session.image_size == Size(100, 200)
            assert backend.calls[0][0] is ImageOrientation.RIGHT

    def test_orientation_from_exif(self):
        from PIL import Image

        exif = Image.Exif()
        exif[274] = 8
        data = image_bytes(200, 100, format="JPEG", exif=exif.tobytes())
        backend = FakeBackend([])

        with ScanSession(backend) as session:
            session.select_image(data)
            session.scan()

            assert session.image_size == Size(100, 200)
            assert backend.calls[0][0] is ImageOrientation.LEFT

    def test_hit_test(self, hello_world):
        data = image_bytes(100, 100)
        with ScanSession(FakeBackend(hello_world)) as session:
            assert session.hit_test(Point(60, 200), Size(300, 600)) is None

            session.select_image(data)
            session.scan()

            tapped = session.hit_test(Point(60, 200), Size(300, 600))
            assert tapped is not None
            assert tapped.combined_text == "Hello World"
            assert session.layout(Size(0, 0)) is None


@pytest.mark.unit
class TestLastResultWins:
    """A newer scan supersedes an older one still in flight."""

    def test_stale_result_not_applied(self, png_bytes):
        stale = [make_fragment("stale", 0.1, 0.1, 0.1, 0.05)]
        fresh = [make_fragment("fresh", 0.1, 0.5, 0.1, 0.05)]
        backend = GatedBackend(first=stale, second=fresh)

        with ThreadPoolExecutor(max_workers=2) as executor:
            session = ScanSession(backend, executor=executor)
            session.select_image(png_bytes)

            first = session.start_scan()
            assert backend.first_started.wait(timeout=5)
            second = session.start_scan()

            assert second.result(timeout=5).fragments[0].text == "fresh"
            backend.release.set()
            assert first.result(timeout=5).fragments[0].text == "stale"

            assert [g.combined_text for g in session.groups] == ["fresh"]

    def test_new_image_discards_in_flight_scan(self, png_bytes):
        old = make_fragment("old", 0.1, 0.1, 0.1, 0.05)
        backend = GatedBackend(first=[old], second=[])

        with ThreadPoolExecutor(max_workers=1) as executor:
            session = ScanSession(backend, executor=executor)
            session.select_image(png_bytes)

            pending = session.start_scan()
            assert backend.first_started.wait(timeout=5)
            session.select_image(png_bytes)
            backend.release.set()

            assert pending.result(timeout=5).fragments[0].text == "old"
            assert session.result is None
            assert session.groups == []
