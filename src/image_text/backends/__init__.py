"""OCR backends.

Backend selection priority in get_backend():
1. Explicit backend_name parameter
2. IMAGE_TEXT_OCR_BACKEND (settings.ocr_backend)
3. IMAGE_TEXT_ENVIRONMENT (local -> livetext, else -> google_vision)
"""

from typing import Optional

from ..config import Settings, get_settings
from .base import OCRBackend, OCRError, open_upright

# Optional backend imports - these may not be available in all environments
try:
    from .google_vision import GoogleVisionBackend
except ImportError:
    GoogleVisionBackend = None  # type: ignore

try:
    from .livetext import LiveTextBackend
except ImportError:
    LiveTextBackend = None  # type: ignore

BACKEND_NAMES = ("livetext", "google_vision")


def get_backend(
    backend_name: Optional[str] = None, settings: Optional[Settings] = None
) -> OCRBackend:
    """Get an OCR backend instance based on settings or explicit name.

    Args:
        backend_name: Optional explicit backend name ('livetext' or 'google_vision')
        settings: Settings to read defaults from (cached settings if omitted)

    Returns:
        Instantiated OCRBackend

    Raises:
        ValueError: If the requested backend is unknown or not installed
    """
    settings = settings or get_settings()

    if backend_name is None:
        backend_name = settings.ocr_backend

    if backend_name is None:
        local = settings.environment.lower() == "local"
        backend_name = "livetext" if local else "google_vision"

    backend_name = backend_name.lower()

    if backend_name == "livetext":
        if LiveTextBackend is None:
            raise ValueError(
                "LiveTextBackend not available. Install ocrmac: pip install ocrmac"
            )
        try:
            return LiveTextBackend()
        except RuntimeError as e:
            raise ValueError(str(e)) from e
    elif backend_name == "google_vision":
        if GoogleVisionBackend is None:
            raise ValueError(
                "GoogleVisionBackend not available. "
                "Install google-cloud-vision: pip install google-cloud-vision"
            )
        return GoogleVisionBackend(credentials_json=settings.google_credentials_json)
    else:
        available = ", ".join(repr(n) for n in BACKEND_NAMES)
        raise ValueError(f"Unknown backend: {backend_name}. Available: {available}")


__all__ = [
    "BACKEND_NAMES",
    "GoogleVisionBackend",
    "LiveTextBackend",
    "OCRBackend",
    "OCRError",
    "get_backend",
    "open_upright",
]
