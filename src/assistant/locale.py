"""Locale negotiation for assistant requests."""

from __future__ import annotations

from collections.abc import Collection


def resolve_locale(
    requested: str | None,
    caller_preferred: str | None,
    supported: Collection[str],
    default: str,
) -> str:
    """Pick the locale for a request.

    The first non-blank of *requested*, *caller_preferred* and *default*
    wins; the choice is lower-cased and silently replaced by *default* when
    it is not in *supported*.

    >>> resolve_locale(None, "FR", ("en", "fr"), "en")
    'fr'
    >>> resolve_locale("de", "fr", ("en", "fr"), "en")
    'en'
    """
    for candidate in (requested, caller_preferred):
        if candidate and candidate.strip():
            chosen = candidate.strip().lower()
            break
    else:
        chosen = default

    return chosen if chosen in supported else default
