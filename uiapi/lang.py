"""
Per-column language support and label resolution
"""
from collections.abc import Mapping
from typing import Any, Optional, Tuple
from .util import headline


def normalize_langs(langs) -> Optional[Tuple[str, ...]]:
    """
    :param langs: language list declared on a column or component
    :return: lowercased, trimmed, deduplicated language codes or None when no list was declared
    """
    if not isinstance(langs, (list, tuple)):
        return None
    result = []
    for lang in langs:
        lang = str(lang).strip().lower()
        if lang and lang not in result:
            result.append(lang)
    return tuple(result)


def supports_lang(langs: Optional[Tuple[str, ...]], lang: str) -> bool:
    """A column without a language list supports every language"""
    if langs is None:
        return True
    return str(lang).strip().lower() in langs


def is_lang_allowed(allowed: Optional[Tuple[str, ...]], lang: str) -> bool:
    """A component without a language list rejects every language"""
    if not allowed:
        return False
    return str(lang).strip().lower() in allowed


def resolve_label(label: Any, lang: str, default: Any = None, first_entry: bool = False) -> Any:
    """
    Pick the text of a label that may be a plain string or a per-language mapping
    :param label: string or {lang: text} mapping
    :param lang: requested language, "en" is the fallback language
    :param default: returned when nothing matches
    :param first_entry: fall back to the first mapping entry before the default
    """
    if isinstance(label, Mapping):
        for key in (lang, "en"):
            if label.get(key) is not None:
                return str(label[key])
        if first_entry and label:
            return str(next(iter(label.values())))
        return default
    if isinstance(label, str) and label != "":
        return label
    return default


def label_for(column, field: str, lang: str) -> str:
    """
    Column label in the requested language, derived from the field name if none is declared
    """
    label = column.label if column is not None else None
    return resolve_label(label, lang, default=headline(field))


def header_lang_override(column, lang: str) -> Optional[str]:
    """
    Hint the client which language a multi-language column should be shown in
    """
    langs = column.lang if column is not None else None
    if not langs:
        return None
    lang = str(lang).strip().lower()
    if lang in langs:
        candidates = [candidate for candidate in langs if candidate != lang]
        if not candidates:
            return None
        if lang == "en" and "dv" in candidates:
            return "dv"
        if lang == "dv" and "en" in candidates:
            return "en"
        return candidates[0]
    if "en" in langs:
        return "en"
    if "dv" in langs:
        return "dv"
    return langs[0]
