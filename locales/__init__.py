"""
i18n module: dict-based translation with fallback to English.
Every toast and fallback error text goes through `t`.
"""

from locales.en import EN_STRINGS

_STRINGS = {"en": EN_STRINGS}


def t(key: str, lang: str = "en", **kwargs) -> str:
    """Get translated string. Falls back to EN if key missing."""
    strings = _STRINGS.get(lang, _STRINGS["en"])
    text = strings.get(key, _STRINGS["en"].get(key, key))
    return text.format(**kwargs) if kwargs else text
