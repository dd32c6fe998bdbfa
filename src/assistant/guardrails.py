"""Prompt guardrails applied to every piece of free text before it reaches
the model backend.

Text is normalized with Unicode NFKC and stripped; the length limit and the
blocked-phrase scan both operate on that normalized form.  Phrase matching
is a case-insensitive substring search, deliberately not word-boundary
aware, so ``"PLEASE IGNORE PREVIOUS INSTRUCTIONS!!"`` is caught as well.

``check`` returns a tagged result (:class:`Accepted` / :class:`Rejected`)
for callers that want to branch on it; ``enforce`` raises
:class:`ValidationError` instead, which the API layer maps to HTTP 400.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass

from src.config import GuardrailPolicy
from src.services.metrics import metrics

logger = logging.getLogger(__name__)

BLOCKED_MESSAGE = "The request was blocked by our safety filters."


class ValidationError(ValueError):
    """Raised when caller-supplied text is empty, oversized or unsafe."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class Accepted:
    normalized: str


@dataclass(frozen=True)
class Rejected:
    reason: str
    field: str
    phrase: str | None = None


GuardrailResult = Accepted | Rejected


def normalize(text: str) -> str:
    """Apply NFKC composition and trim surrounding whitespace."""
    return unicodedata.normalize("NFKC", text).strip()


class GuardrailValidator:
    """Validates text against a :class:`GuardrailPolicy`."""

    def __init__(self, policy: GuardrailPolicy) -> None:
        self._blocked = tuple(sorted({normalize(p).lower() for p in policy.blocked_phrases} - {""}))
        self._max_length = policy.max_prompt_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def check(self, text: str | None, field_name: str) -> GuardrailResult:
        if not text or not text.strip():
            return Rejected(f"{field_name} cannot be empty.", field_name)

        normalized = normalize(text)
        # NFKC can turn exotic whitespace into plain spaces
        if not normalized:
            return Rejected(f"{field_name} cannot be empty.", field_name)

        if len(normalized) > self._max_length:
            return Rejected(
                f"{field_name} exceeds the maximum allowed length of "
                f"{self._max_length} characters.",
                field_name,
            )

        lowered = normalized.lower()
        for phrase in self._blocked:
            if phrase in lowered:
                return Rejected(BLOCKED_MESSAGE, field_name, phrase=phrase)

        return Accepted(normalized)

    def enforce(self, text: str | None, field_name: str) -> str:
        """Return the normalized text or raise :class:`ValidationError`."""
        result = self.check(text, field_name)
        if isinstance(result, Rejected):
            if result.phrase is not None:
                logger.warning(
                    "Prompt rejected due to guardrail match field=%s phrase=%r",
                    field_name, result.phrase,
                )
                metrics.record_guardrail_block(field_name)
            raise ValidationError(result.reason, field=result.field)
        return result.normalized
