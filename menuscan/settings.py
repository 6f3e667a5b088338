"""
Environment-driven settings.

A `.env` file at the project root is loaded first, so TESSERACT_CMD and the
vision API key work without exporting them in the shell.

  MENUSCAN_LOG_LEVEL     DEBUG | INFO | WARNING | ERROR   (default INFO)
  TESSERACT_CMD          explicit tesseract executable
  TESSERACT_LANG         default "eng"
  TESSERACT_CONFIG       default "--oem 1 --psm 6"
  GOOGLE_VISION_API_KEY  enables the remote vision engine
  MENUSCAN_MAX_WORKERS   parallel OCR workers for batches (default 1)
  MENUSCAN_MAX_UPLOAD_MB portal upload limit (default 20)
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.INFO
    tesseract_cmd: Optional[str] = None
    tesseract_lang: str = "eng"
    tesseract_config: str = "--oem 1 --psm 6"
    vision_api_key: Optional[str] = None
    max_workers: int = 1
    max_upload_mb: int = 20


def load_settings(env_file: Optional[Path] = None) -> Settings:
    load_dotenv(env_file or ROOT / ".env")
    return Settings(
        log_level=_LEVELS.get((os.getenv("MENUSCAN_LOG_LEVEL") or "").upper(), logging.INFO),
        tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
        tesseract_lang=os.getenv("TESSERACT_LANG") or "eng",
        tesseract_config=os.getenv("TESSERACT_CONFIG") or "--oem 1 --psm 6",
        vision_api_key=(os.getenv("GOOGLE_VISION_API_KEY") or "").strip() or None,
        max_workers=max(1, _int_env("MENUSCAN_MAX_WORKERS", 1)),
        max_upload_mb=max(1, _int_env("MENUSCAN_MAX_UPLOAD_MB", 20)),
    )


def configure_logging(level: Optional[int] = None) -> None:
    """Attach a stderr handler to the `menuscan` logger namespace (once)."""
    global _logging_configured
    if _logging_configured:
        return

    if level is None:
        level = load_settings().log_level

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT))

    root_logger = logging.getLogger("menuscan")
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    _logging_configured = True
