"""Source normalization and publisher helpers."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union
from urllib.parse import urlparse

import tldextract

from .fields import as_mapping, as_str, optional_str, resolve_first
from .models import DEFAULT_PROVIDER, Diagnostic, Normalized, Source
from .timestamps import timestamp_to_iso

LOGGER = logging.getLogger(__name__)

FAVICON_SERVICE = "https://api.faviconkit.com/{host}/64"

# Bundled public suffix snapshot only; no network fetch.
_EXTRACT = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())


def normalize_source(raw: Any) -> Source:
    """Canonicalize one source entry. The link may come back empty."""

    if isinstance(raw, Source):
        raw = raw.to_dict()
    src = as_mapping(raw)
    link = as_str(src.get("link")).strip()
    name = resolve_first(src, "source.name", predicate=lambda v: isinstance(v, str), default="")
    provider = src.get("provider")
    return Source(
        link=link,
        title=as_str(src.get("title")),
        source_name=name,
        image_url=optional_str(src.get("imageUrl")),
        pub_date=timestamp_to_iso(src.get("pubDate")) or None,
        provider=provider if isinstance(provider, str) and provider else DEFAULT_PROVIDER,
    )


def normalize_source_report(raw: Any, path: str = "sources") -> Normalized[List[Source]]:
    if not isinstance(raw, (list, tuple)):
        return Normalized(value=[])
    kept: List[Source] = []
    diagnostics: List[Diagnostic] = []
    for idx, entry in enumerate(raw):
        source = normalize_source(entry)
        if not source.link:
            diagnostics.append(Diagnostic(path=f"{path}[{idx}]", reason="missing link"))
            continue
        kept.append(source)
    return Normalized(value=kept, diagnostics=diagnostics)


def normalize_source_list(raw: Any) -> List[Source]:
    """Normalize a list of sources, dropping entries without a link."""

    report = normalize_source_report(raw)
    if report.dropped:
        LOGGER.debug("Dropped %d sources without a link", report.dropped)
    return report.value


def _link_of(source: Union[Source, str, None]) -> str:
    if isinstance(source, Source):
        return source.link
    return source or ""


def publisher_domain(source: Union[Source, str, None]) -> str:
    """Registered domain of a source link (``"bbc.co.uk"``), or ``""``."""

    link = _link_of(source)
    if not link:
        return ""
    ext = _EXTRACT(link)
    return ".".join(part for part in [ext.domain, ext.suffix] if part)


def favicon_url(source: Union[Source, str, None]) -> Optional[str]:
    host = urlparse(_link_of(source)).hostname
    if not host:
        return None
    return FAVICON_SERVICE.format(host=host)


def fallback_favicon_url(source: Union[Source, str, None]) -> Optional[str]:
    parsed = urlparse(_link_of(source))
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}/favicon.ico"


def publisher_initials(name: Optional[str]) -> str:
    """Up to three initials for a publisher badge."""

    words = (name or "").split()
    initials = "".join(word[0] for word in words)[:3].upper()
    return initials or "?"


__all__ = [
    "favicon_url",
    "fallback_favicon_url",
    "normalize_source",
    "normalize_source_list",
    "normalize_source_report",
    "publisher_domain",
    "publisher_initials",
]
