"""
Batch runs — several scanned menus in, one result out.

A single input yields its ParsedMenu; several inputs yield ProcessedMenus
with a combined summary. Each image is OCR'd and parsed on its own; the
combine step runs only after every parse has finished.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Protocol, Sequence, Union

from .errors import VisionApiError
from .menu_parser import ParserConfig, parse_menu_text
from .menu_summary import combine_menus
from .menu_types import ParsedMenu, ProcessedMenus
from .ocr_sources import ImageInput

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]
MenuResult = Union[ParsedMenu, ProcessedMenus]


class TextSource(Protocol):
    name: str

    def extract_text(self, path: ImageInput) -> str: ...


def _noop_progress(status: str, fraction: float) -> None:
    pass


def acquire_text(
    path: ImageInput,
    source: TextSource,
    fallback: Optional[TextSource] = None,
) -> str:
    """OCR one image; a vision API failure falls back to the local engine."""
    try:
        return source.extract_text(path)
    except VisionApiError as e:
        if fallback is None:
            raise
        log.warning("%s failed for %s, falling back to %s: %s", source.name, path, fallback.name, e)
        return fallback.extract_text(path)


def _finish(menus: List[ParsedMenu]) -> MenuResult:
    if len(menus) == 1:
        return menus[0]
    return combine_menus(menus)


def process_texts(texts: Sequence[str], config: Optional[ParserConfig] = None) -> MenuResult:
    if not texts:
        raise ValueError("process_texts() needs at least one text")
    return _finish([parse_menu_text(t, config) for t in texts])


def process_images(
    paths: Sequence[ImageInput],
    source: TextSource,
    fallback: Optional[TextSource] = None,
    progress: Optional[ProgressCallback] = None,
    max_workers: int = 1,
    config: Optional[ParserConfig] = None,
) -> MenuResult:
    """
    OCR and parse every image in `paths`.

    `progress(status, fraction)` receives non-decreasing fractions and ends
    at 1.0. With `max_workers > 1` images are processed in parallel, but
    menus keep input order.
    """
    if not paths:
        raise ValueError("process_images() needs at least one image")

    report = progress or _noop_progress
    total = len(paths)
    report("Initializing OCR...", 0.0)

    def _one(path: ImageInput) -> ParsedMenu:
        text = acquire_text(path, source, fallback)
        return parse_menu_text(text, config)

    menus: List[ParsedMenu] = []
    if max_workers <= 1 or total == 1:
        for i, path in enumerate(paths):
            report(f"Processing file {i + 1} of {total}: {path}", (i / total) * 0.9)
            menus.append(_one(path))
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(_one, p) for p in paths]
            for i, fut in enumerate(futures):
                menus.append(fut.result())
                report(f"Parsed file {i + 1} of {total}", ((i + 1) / total) * 0.9)

    if total > 1:
        report("Generating combined analysis...", 0.95)
    result = _finish(menus)
    report("Complete!", 1.0)
    return result
