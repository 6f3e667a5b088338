# menuscan/ocr_sources.py
"""
Text acquisition — image → raw OCR text.

Two engines, both returning one text blob per image:
- TesseractTextSource: local pytesseract over a Pillow-preprocessed image
- VisionApiTextSource: Google Vision `images:annotate` TEXT_DETECTION

Failures raise TextAcquisitionError (or a subclass); the parser is never
handed partial text.
"""

from __future__ import annotations

import base64
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pytesseract
import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import TextAcquisitionError, UnsupportedImageError, VisionApiError
from .settings import Settings, load_settings

log = logging.getLogger(__name__)

ImageInput = Union[str, Path]

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "bmp", "tif", "tiff", "webp", "gif"}

GOOGLE_VISION_API_URL = "https://vision.googleapis.com/v1/images:annotate"


def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


# =============================
# Tesseract
# =============================

def resolve_tesseract_cmd(explicit: Optional[str] = None) -> str:
    """Explicit path if it exists, else whatever is on PATH, else ""."""
    if explicit and Path(explicit).exists():
        return explicit
    return shutil.which("tesseract") or shutil.which("tesseract.exe") or ""


def tesseract_health(settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or load_settings()
    cmd = resolve_tesseract_cmd(settings.tesseract_cmd)
    if cmd:
        pytesseract.pytesseract.tesseract_cmd = cmd
    try:
        version = str(pytesseract.get_tesseract_version())
    except (pytesseract.TesseractNotFoundError, OSError) as e:
        return {"found_on_disk": False, "cmd": cmd, "version": None, "error": str(e)}
    return {
        "found_on_disk": True,
        "cmd": cmd,
        "version": version,
        "lang": settings.tesseract_lang,
        "config": settings.tesseract_config,
    }


def _open_image(path: ImageInput) -> Image.Image:
    try:
        img = Image.open(path)
        img.load()
    except FileNotFoundError as e:
        raise TextAcquisitionError(f"Image not found: {path}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedImageError(f"Cannot read image {path}: {e}") from e
    return img


def preprocess(img: Image.Image) -> Image.Image:
    """Grayscale + autocontrast; honours EXIF rotation from phone scans."""
    img = ImageOps.exif_transpose(img)
    img = img.convert("L")
    return ImageOps.autocontrast(img)


class TesseractTextSource:
    name = "tesseract"

    def __init__(
        self,
        lang: str = "eng",
        config: str = "--oem 1 --psm 6",
        cmd: Optional[str] = None,
    ):
        self.lang = lang
        self.config = config
        resolved = resolve_tesseract_cmd(cmd)
        if resolved:
            pytesseract.pytesseract.tesseract_cmd = resolved

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TesseractTextSource":
        settings = settings or load_settings()
        return cls(settings.tesseract_lang, settings.tesseract_config, settings.tesseract_cmd)

    def extract_text(self, path: ImageInput) -> str:
        img = preprocess(_open_image(path))
        try:
            text = pytesseract.image_to_string(img, lang=self.lang, config=self.config)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise TextAcquisitionError(f"Tesseract failed on {path}: {e}") from e
        log.debug("Tesseract extracted %d chars from %s", len(text or ""), path)
        return text or ""


# =============================
# Google Vision
# =============================

def _describe_http_error(status: int, message: str) -> str:
    if status == 400:
        if "API key not valid" in message:
            return "Invalid API key. Please check your Google Vision API key."
        if "API has not been used" in message or "not enabled" in message:
            return "Google Vision API is not enabled. Please enable it in Google Cloud Console."
        return f"Bad request: {message or 'Please check your API setup'}"
    if status == 403:
        return "Access denied. Please check API permissions and billing."
    return f"API request failed ({status}): {message or 'Unknown error'}"


class VisionApiTextSource:
    name = "vision"

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request_body(self, path: ImageInput) -> Dict[str, Any]:
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise TextAcquisitionError(f"Cannot read image {path}: {e}") from e
        return {
            "requests": [{
                "image": {"content": base64.b64encode(raw).decode("ascii")},
                "features": [{"type": "TEXT_DETECTION"}],
            }]
        }

    def extract_text(self, path: ImageInput) -> str:
        if not self.api_key:
            raise VisionApiError("Google Vision API key is required")

        try:
            resp = self.session.post(
                GOOGLE_VISION_API_URL,
                params={"key": self.api_key},
                json=self._request_body(path),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise VisionApiError(f"Failed to reach Google Vision API: {e}") from e

        if resp.status_code != 200:
            try:
                message = (resp.json().get("error") or {}).get("message", "")
            except ValueError:
                message = resp.text or ""
            raise VisionApiError(_describe_http_error(resp.status_code, message), resp.status_code)

        payload = resp.json()
        responses = payload.get("responses") or []
        if not responses:
            raise VisionApiError("Invalid response from Google Vision API")

        result = responses[0]
        if result.get("error"):
            raise VisionApiError(f"Google Vision API error: {result['error'].get('message', '')}")

        annotations = result.get("textAnnotations") or []
        if not annotations:
            raise VisionApiError("No text detected in the image")

        text = annotations[0].get("description") or ""
        log.debug("Vision API extracted %d chars from %s", len(text), path)
        return text
