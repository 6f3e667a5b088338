# portal/app.py
from flask import Flask, jsonify, request

# --- Standard libs & typing ---
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.utils import secure_filename

from menuscan.batch import process_images, process_texts
from menuscan.errors import MenuScanError
from menuscan.menu_parser import CATALOGS, ParserConfig
from menuscan.ocr_sources import (
    TesseractTextSource,
    VisionApiTextSource,
    allowed_file,
    tesseract_health,
)
from menuscan.parsers.menu_grammar import classify_menu_lines
from menuscan.settings import configure_logging, load_settings
from portal.contracts import validate_classify_payload, validate_parse_payload

# ------------------------
# App & Config
# ------------------------
SETTINGS = load_settings()
configure_logging(SETTINGS.log_level)
log = logging.getLogger("menuscan.portal")

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = SETTINGS.max_upload_mb * 1024 * 1024
app.json.sort_keys = False


def _config_for(catalog: Optional[str]) -> Optional[ParserConfig]:
    if not catalog:
        return None
    return ParserConfig(catalog=CATALOGS[catalog])


def _error(message: str, status: int):
    return jsonify({"ok": False, "error": message}), status


# ------------------------
# Error handlers
# ------------------------

@app.errorhandler(MenuScanError)
def handle_menuscan_error(e: MenuScanError):
    log.warning("Request failed: %s", e)
    return _error(str(e), e.status_code)


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(_e):
    return _error(f"Upload too large (limit {SETTINGS.max_upload_mb} MB)", 413)


@app.errorhandler(HTTPException)
def handle_http_error(e: HTTPException):
    return _error(e.description or e.name, e.code or 500)


# ------------------------
# Routes
# ------------------------

@app.get("/ocr/health")
def ocr_health_route():
    return jsonify({"ok": True, "engine": "menuscan-ocr", "tesseract": tesseract_health(SETTINGS)})


@app.post("/api/menus/parse")
def parse_menu_route():
    payload = request.get_json(silent=True)
    ok, err = validate_parse_payload(payload, tuple(CATALOGS))
    if not ok:
        return _error(err, 400)

    config = _config_for(payload.get("catalog"))
    texts = payload["texts"] if "texts" in payload else [payload["text"]]
    result = process_texts(texts, config)
    return jsonify({"ok": True, "result": result.to_dict()})


@app.post("/api/menus/classify")
def classify_route():
    payload = request.get_json(silent=True)
    ok, err = validate_classify_payload(payload)
    if not ok:
        return _error(err, 400)
    lines = classify_menu_lines(payload["text"])
    return jsonify({
        "ok": True,
        "lines": [{"index": ln.index, "text": ln.text, "type": ln.line_type} for ln in lines],
    })


@app.post("/api/menus/ocr")
def ocr_menu_route():
    files = request.files.getlist("file")
    if not files:
        return _error("No file field 'file' provided", 400)
    for f in files:
        if not f.filename:
            return _error("Empty filename", 400)
        if not allowed_file(f.filename):
            return _error(f"Unsupported file type: {f.filename}", 400)

    catalog = request.form.get("catalog") or None
    if catalog and catalog not in CATALOGS:
        return _error(f"unknown catalog '{catalog}'", 400)

    engine = (request.form.get("engine") or "tesseract").lower()
    if engine not in ("tesseract", "vision"):
        return _error(f"unknown engine '{engine}'", 400)

    tesseract = TesseractTextSource.from_settings(SETTINGS)
    if engine == "vision":
        source = VisionApiTextSource(request.form.get("api_key") or SETTINGS.vision_api_key)
        fallback = tesseract
    else:
        source, fallback = tesseract, None

    with tempfile.TemporaryDirectory(prefix="menuscan_") as tmp:
        paths: List[Path] = []
        for i, f in enumerate(files):
            dest = Path(tmp) / f"{i:03d}_{secure_filename(f.filename)}"
            f.save(dest)
            paths.append(dest)

        result = process_images(
            paths,
            source=source,
            fallback=fallback,
            max_workers=SETTINGS.max_workers,
            config=_config_for(catalog),
        )
    return jsonify({"ok": True, "engine": engine, "result": result.to_dict()})


if __name__ == "__main__":
    app.run(debug=False)
