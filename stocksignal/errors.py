"""Exception hierarchy for StockSignal."""

from typing import Any, Optional


class StockSignalError(Exception):
    """Base class for all errors raised by StockSignal."""

    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_dict(self) -> dict:
        """Serialize the error into a response body.

        Returns:
            Dictionary with success flag, message, code and optional details.
        """
        body = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(StockSignalError):
    """Malformed input, rejected before any network call."""

    default_code = "VALIDATION_ERROR"


class DataSourceError(StockSignalError):
    """Upstream market data was unavailable or failed sanity checks."""

    default_code = "DATA_SOURCE_ERROR"


class AnalysisError(StockSignalError):
    """Insufficient history or an internal computation failure."""

    default_code = "ANALYSIS_ERROR"


class ChartError(AnalysisError):
    """History too short to populate the chart display window."""

    default_code = "CHART_ERROR"
