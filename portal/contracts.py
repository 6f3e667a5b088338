# portal/contracts.py
from __future__ import annotations
from typing import Any, Tuple

ParseKeys = {"text", "texts", "catalog"}

def validate_parse_payload(payload: Any, known_catalogs: Tuple[str, ...] = ()) -> Tuple[bool, str]:
    if not isinstance(payload, dict):
        return False, "body must be a JSON object"

    unknown = [k for k in payload if k not in ParseKeys]
    if unknown:
        return False, f"unknown keys: {', '.join(sorted(unknown))}"

    has_text = "text" in payload
    has_texts = "texts" in payload
    if has_text == has_texts:
        return False, "provide exactly one of 'text' or 'texts'"

    if has_text and not isinstance(payload["text"], str):
        return False, "text must be a string"

    if has_texts:
        texts = payload["texts"]
        if not isinstance(texts, list) or not texts:
            return False, "texts must be a non-empty list"
        for i, t in enumerate(texts):
            if not isinstance(t, str):
                return False, f"texts[{i}] must be a string"

    catalog = payload.get("catalog")
    if catalog is not None:
        if not isinstance(catalog, str):
            return False, "catalog must be a string"
        if catalog not in known_catalogs:
            return False, f"unknown catalog '{catalog}'"

    return True, ""

def validate_classify_payload(payload: Any) -> Tuple[bool, str]:
    if not isinstance(payload, dict):
        return False, "body must be a JSON object"
    if not isinstance(payload.get("text"), str):
        return False, "text must be a string"
    return True, ""
