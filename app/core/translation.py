"""Localized message lookup."""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import Request

from app.core.config import settings
from app.lang.messages import MESSAGES

logger = logging.getLogger(__name__)


def get_translation(lang: str, key: str, args: Sequence[Any] | None = None) -> str:
    """Return the message for `key` in `lang`.

    Callable entries are invoked with `args` when args are given. Unknown
    languages and keys fall back to the key itself.
    """
    value = MESSAGES.get(lang, {}).get(key)

    if callable(value):
        if args:
            return value(*args)
        logger.debug("Message %r in %r needs arguments, none given", key, lang)
        return key

    return value or key


def lang_from_request(request: Request) -> str:
    """Resolve the caller's language: `lang` query param, Accept-Language, then the default."""
    lang = request.query_params.get("lang")
    if lang:
        return lang.strip().lower()

    header = request.headers.get("accept-language")
    if header:
        # "en-US,en;q=0.9" -> "en"
        primary = header.split(",")[0].split(";")[0].strip()
        if primary:
            return primary.split("-")[0].lower()

    return settings.default_language
