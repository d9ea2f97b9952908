"""
================================================================================
Locale Context
================================================================================

The clinic application selects its display language from the `lang` query
parameter and expects every internal link to re-emit it. This module models
that state as an explicit value so link generation and link checks are pure
functions of (locale, path).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit


LANG_PARAM = "lang"
DEFAULT_LOCALE = "en"


@dataclass(frozen=True)
class LocaleOption:
    """One entry of the language selector dropdown."""
    code: str
    flag: str
    display_name: str


# Order matches the selector dropdown
SUPPORTED_LOCALES: Tuple[LocaleOption, ...] = (
    LocaleOption("en", "🇺🇸", "English"),
    LocaleOption("de", "🇩🇪", "Deutsch"),
    LocaleOption("es", "🇪🇸", "Español"),
    LocaleOption("ko", "🇰🇷", "한국어"),
    LocaleOption("fa", "🇮🇷", "فارسی"),
    LocaleOption("pt", "🇵🇹", "Português"),
    LocaleOption("ru", "🇷🇺", "Русский"),
    LocaleOption("tr", "🇹🇷", "Türkçe"),
    LocaleOption("zh", "🇨🇳", "中文"),
)

SUPPORTED_CODES = frozenset(option.code for option in SUPPORTED_LOCALES)


# Known translated substrings used to spot-check a rendered locale.
# Keys: hero = landing page h1, home = navbar home link,
# find_owners = navbar link / find page heading, vets = navbar link / vets heading
TRANSLATION_SAMPLES: Dict[str, Dict[str, str]] = {
    "en": {
        "hero": "Care made modern",
        "home": "Home",
        "find_owners": "Find Owners",
        "vets": "Veterinarians",
    },
    "de": {
        "hero": "Moderne Tierpflege",
        "home": "Startseite",
        "vets": "Tierärzte",
    },
    "es": {
        "hero": "Cuidado moderno",
        "home": "Inicio",
        "find_owners": "Buscar propietarios",
    },
    "ko": {
        "home": "홈",
    },
}


def locale_option(code: str) -> LocaleOption:
    """Look up a supported locale by code."""
    for option in SUPPORTED_LOCALES:
        if option.code == code:
            return option
    raise KeyError(f"Unsupported locale: {code}")


def resolve_locale(code: Optional[str]) -> str:
    """
    Return the locale the application will actually render.

    Unknown or missing codes fall back to DEFAULT_LOCALE.
    """
    if code and code in SUPPORTED_CODES:
        return code
    return DEFAULT_LOCALE


def lang_of(url: str) -> Optional[str]:
    """Return the `lang` query value of a URL, or None."""
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key == LANG_PARAM:
            return value
    return None


def with_locale(path: str, code: Optional[str]) -> str:
    """
    Return `path` carrying `lang=<code>`, preserving other query parameters.

    An existing `lang` value is replaced. With no code the path is returned
    without a `lang` parameter.

    >>> with_locale("/owners?lastName=Davis", "es")
    '/owners?lastName=Davis&lang=es'
    >>> with_locale("/?lang=de", "ko")
    '/?lang=ko'
    """
    parts = urlsplit(path)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != LANG_PARAM]
    if code:
        query.append((LANG_PARAM, code))
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", urlencode(query), parts.fragment))


def _is_navigational(href: str) -> bool:
    stripped = href.strip()
    if not stripped or stripped.startswith("#"):
        return False
    scheme = urlsplit(stripped).scheme.lower()
    return scheme in ("", "http", "https")


def find_locale_leaks(hrefs: Iterable[str], code: str, origin: str) -> List[str]:
    """
    Return same-origin hrefs that do not carry `lang=<code>`.

    Relative hrefs are resolved against `origin`. Fragment-only anchors and
    non-HTTP schemes (mailto:, javascript:) are ignored, as are links to
    other origins.
    """
    origin_parts = urlsplit(origin)
    leaks: List[str] = []
    for href in hrefs:
        if href is None or not _is_navigational(href):
            continue
        absolute = urlsplit(urljoin(origin, href))
        if absolute.netloc != origin_parts.netloc:
            continue
        if lang_of(absolute.geturl()) != code:
            leaks.append(href)
    return leaks


@dataclass(frozen=True)
class LocaleContext:
    """
    Current display language of a browser session.

    `code` is the raw `lang` value from the URL (None when absent);
    `effective` is what the application renders after fallback.
    """
    code: Optional[str] = None
    effective: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "effective", resolve_locale(self.code))

    @classmethod
    def from_url(cls, url: str) -> "LocaleContext":
        """Derive the locale from a page URL."""
        return cls(lang_of(url))

    def apply(self, path: str) -> str:
        """Build a link to `path` that keeps this locale."""
        return with_locale(path, self.code)

    @property
    def is_default(self) -> bool:
        return self.effective == DEFAULT_LOCALE


__all__ = [
    "LANG_PARAM",
    "DEFAULT_LOCALE",
    "LocaleOption",
    "SUPPORTED_LOCALES",
    "SUPPORTED_CODES",
    "TRANSLATION_SAMPLES",
    "LocaleContext",
    "locale_option",
    "resolve_locale",
    "lang_of",
    "with_locale",
    "find_locale_leaks",
]
