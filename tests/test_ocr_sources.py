"""
Text acquisition engines (pytesseract and Google Vision).

Covers:
  Files:
  - allowed_file extension whitelist

  Tesseract:
  - preprocessed image handed to pytesseract with configured lang / config
  - missing file → TextAcquisitionError
  - non-image file → UnsupportedImageError
  - engine failure → TextAcquisitionError
  - health check: version found / not found

  Google Vision:
  - missing key raises before any request
  - request shape (key param, base64 content, TEXT_DETECTION)
  - HTTP 400 / 403 mapped to readable messages with status
  - empty responses, per-image error, no annotations
  - transport errors wrapped
"""

from __future__ import annotations

import base64

import pytest
import pytesseract
import requests
from PIL import Image

from menuscan.errors import TextAcquisitionError, UnsupportedImageError, VisionApiError
from menuscan.ocr_sources import (
    GOOGLE_VISION_API_URL,
    TesseractTextSource,
    VisionApiTextSource,
    allowed_file,
    tesseract_health,
)
from menuscan.settings import Settings


@pytest.fixture()
def menu_png(tmp_path):
    path = tmp_path / "menu.png"
    Image.new("RGB", (40, 20), "white").save(path)
    return path


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class TestAllowedFile:
    def test_images_allowed(self):
        assert allowed_file("menu.PNG")
        assert allowed_file("scan.2024.jpeg")

    def test_others_rejected(self):
        assert not allowed_file("menu.pdf")
        assert not allowed_file("noextension")


# ==================================================================
# Tesseract
# ==================================================================

class TestTesseract:
    def test_extract_text(self, monkeypatch, menu_png):
        seen = {}

        def fake_image_to_string(img, lang=None, config=None):
            seen.update(mode=img.mode, lang=lang, config=config)
            return "FRIES\nCurly Fries $4.99\n"

        monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
        source = TesseractTextSource(lang="eng", config="--psm 4")
        assert source.extract_text(menu_png) == "FRIES\nCurly Fries $4.99\n"
        assert seen == {"mode": "L", "lang": "eng", "config": "--psm 4"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(TextAcquisitionError) as exc:
            TesseractTextSource().extract_text(tmp_path / "nope.png")
        assert not isinstance(exc.value, UnsupportedImageError)

    def test_not_an_image(self, tmp_path):
        bogus = tmp_path / "menu.png"
        bogus.write_text("definitely not a png")
        with pytest.raises(UnsupportedImageError) as exc:
            TesseractTextSource().extract_text(bogus)
        assert exc.value.status_code == 400

    def test_engine_failure(self, monkeypatch, menu_png):
        def boom(*args, **kwargs):
            raise pytesseract.TesseractError(1, "bad config")

        monkeypatch.setattr(pytesseract, "image_to_string", boom)
        with pytest.raises(TextAcquisitionError):
            TesseractTextSource().extract_text(menu_png)

    def test_health_found(self, monkeypatch):
        monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
        health = tesseract_health(Settings(tesseract_lang="eng"))
        assert health["found_on_disk"] is True
        assert health["version"] == "5.3.0"
        assert health["lang"] == "eng"

    def test_health_not_found(self, monkeypatch):
        def missing():
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)
        health = tesseract_health(Settings())
        assert health["found_on_disk"] is False
        assert health["version"] is None


# ==================================================================
# Google Vision
# ==================================================================

class TestVisionApi:
    def test_missing_key(self, menu_png):
        session = FakeSession()
        with pytest.raises(VisionApiError, match="API key is required"):
            VisionApiTextSource(None, session=session).extract_text(menu_png)
        assert session.calls == []

    def test_success_and_request_shape(self, menu_png):
        payload = {"responses": [{"textAnnotations": [
            {"description": "DRINKS\nIced Tea $2.50"},
            {"description": "DRINKS"},
        ]}]}
        session = FakeSession(FakeResponse(200, payload))
        text = VisionApiTextSource("k123", session=session).extract_text(menu_png)

        assert text == "DRINKS\nIced Tea $2.50"
        call = session.calls[0]
        assert call["url"] == GOOGLE_VISION_API_URL
        assert call["params"] == {"key": "k123"}
        req = call["json"]["requests"][0]
        assert req["features"] == [{"type": "TEXT_DETECTION"}]
        assert base64.b64decode(req["image"]["content"]) == menu_png.read_bytes()

    @pytest.mark.parametrize("status,message,expected", [
        (400, "API key not valid. Please pass a valid API key.", "Invalid API key"),
        (400, "Cloud Vision API has not been used in project 1", "not enabled"),
        (400, "", "Bad request"),
        (403, "billing", "Access denied"),
        (500, "boom", "API request failed (500)"),
    ])
    def test_http_errors(self, menu_png, status, message, expected):
        resp = FakeResponse(status, {"error": {"message": message}})
        with pytest.raises(VisionApiError) as exc:
            VisionApiTextSource("k", session=FakeSession(resp)).extract_text(menu_png)
        assert expected in str(exc.value)
        assert exc.value.http_status == status

    def test_non_json_error_body(self, menu_png):
        resp = FakeResponse(502, None, text="Bad Gateway")
        with pytest.raises(VisionApiError, match="Bad Gateway"):
            VisionApiTextSource("k", session=FakeSession(resp)).extract_text(menu_png)

    def test_empty_responses(self, menu_png):
        resp = FakeResponse(200, {"responses": []})
        with pytest.raises(VisionApiError, match="Invalid response"):
            VisionApiTextSource("k", session=FakeSession(resp)).extract_text(menu_png)

    def test_per_image_error(self, menu_png):
        resp = FakeResponse(200, {"responses": [{"error": {"message": "image too large"}}]})
        with pytest.raises(VisionApiError, match="image too large"):
            VisionApiTextSource("k", session=FakeSession(resp)).extract_text(menu_png)

    def test_no_text(self, menu_png):
        resp = FakeResponse(200, {"responses": [{}]})
        with pytest.raises(VisionApiError, match="No text detected"):
            VisionApiTextSource("k", session=FakeSession(resp)).extract_text(menu_png)

    def test_transport_error(self, menu_png):
        session = FakeSession(error=requests.ConnectionError("dns"))
        with pytest.raises(VisionApiError, match="Failed to reach"):
            VisionApiTextSource("k", session=session).extract_text(menu_png)
