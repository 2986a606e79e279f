"""Localized messages for business error codes.

Catalogs live next to ``codes.py`` as ``<locale>.json`` files keyed by the
numeric code. Templates use ``str.format`` fields filled from the error's
keyword arguments, e.g. ``"Missing required parameter: {field}"``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Optional

from vidtube.i18n.codes import ErrorCode

DEFAULT_LOCALE = "en"
CATALOG_DIR = Path(__file__).resolve().parents[1] / "i18n"
SUPPORTED_LOCALES = frozenset({"en", "zh"})


@lru_cache(maxsize=None)
def load_catalog(locale: str) -> Mapping[int, str]:
    path = CATALOG_DIR / f"{locale}.json"
    if locale not in SUPPORTED_LOCALES or not path.exists():
        return {}
    data: object = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        return {}
    catalog: Dict[int, str] = {}
    for key, value in data.items():
        if isinstance(key, str) and key.isdigit() and isinstance(value, str):
            catalog[int(key)] = value
    return catalog


def negotiate_locale(accept_language: Optional[str]) -> str:
    """Pick a catalog from the first Accept-Language tag ("zh-CN,zh;q=0.9" -> "zh")."""
    if not accept_language:
        return DEFAULT_LOCALE
    first_tag = accept_language.split(",")[0].split(";")[0].strip().lower()
    lang = first_tag.split("-")[0]
    return lang if lang in SUPPORTED_LOCALES else DEFAULT_LOCALE


def get_message(code: ErrorCode, locale: str, **kwargs: str) -> str:
    template = load_catalog(locale).get(code.value)
    if template is None:
        template = load_catalog(DEFAULT_LOCALE).get(code.value, "Unknown error")
    if not kwargs:
        return template
    try:
        return template.format_map(kwargs)
    except KeyError:
        return template
