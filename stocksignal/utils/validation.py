"""Ticker symbol validation."""

import re

from pydantic import BaseModel, Field

from stocksignal.errors import ValidationError

MIN_TICKER_LENGTH = 1
MAX_TICKER_LENGTH = 10

_ALLOWED = re.compile(r"^[A-Z0-9.\-]+$")
_CONSECUTIVE_SEPARATORS = re.compile(r"[.\-]{2,}")


class TickerValidation(BaseModel):
    """Outcome of validating a raw ticker string."""

    is_valid: bool
    sanitized_ticker: str
    errors: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


def validate_ticker(raw: str) -> TickerValidation:
    """Sanitize and validate a ticker symbol.

    The input is trimmed and upper-cased before checks are applied; every
    failed check is reported.

    Args:
        raw: User-supplied ticker.

    Returns:
        TickerValidation with the sanitized ticker and any errors.
    """
    ticker = str(raw).strip().upper()
    errors = []

    if len(ticker) < MIN_TICKER_LENGTH:
        errors.append(f"Ticker must be at least {MIN_TICKER_LENGTH} characters")
    if len(ticker) > MAX_TICKER_LENGTH:
        errors.append(f"Ticker cannot exceed {MAX_TICKER_LENGTH} characters")

    if ticker:
        if not _ALLOWED.match(ticker):
            errors.append("Ticker contains invalid characters")
        if ticker[0] in ".-" or ticker[-1] in ".-":
            errors.append("Ticker cannot start or end with dot or dash")
        if _CONSECUTIVE_SEPARATORS.search(ticker):
            errors.append("Ticker cannot contain consecutive dots or dashes")

    return TickerValidation(
        is_valid=not errors,
        sanitized_ticker=ticker,
        errors=errors,
    )


def is_valid_ticker(raw: str) -> bool:
    """Return True if ``raw`` passes every ticker check."""
    return validate_ticker(raw).is_valid


def require_valid_ticker(raw: str) -> str:
    """Validate a ticker and return it sanitized.

    Raises:
        ValidationError: With the failed checks as details.
    """
    result = validate_ticker(raw)
    if not result.is_valid:
        raise ValidationError(
            f"Invalid ticker symbol: {raw!r}",
            details=result.errors,
        )
    return result.sanitized_ticker
