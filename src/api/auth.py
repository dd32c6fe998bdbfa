"""Caller identity supplied by the authentication gateway.

Tokens are verified upstream; the gateway forwards the authenticated user
id and preferred locale as ``X-User-Id`` / ``X-User-Locale`` headers.
"""

from __future__ import annotations

from fastapi import Header, HTTPException

from src.assistant.models import Caller


async def get_caller(
    x_user_id: str | None = Header(None, max_length=100),
    x_user_locale: str | None = Header(None, max_length=10),
) -> Caller:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required.")
    return Caller(id=x_user_id.strip(), locale=x_user_locale)
