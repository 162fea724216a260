"""Custom exceptions for mailframe."""

from typing import Optional


class MailframeError(Exception):
    """Base exception for mailframe errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class SelectionError(MailframeError):
    """Raised when the export root is missing, ambiguous or has no bounds."""

    pass


class QuotaError(MailframeError):
    """Raised when the credit ledger does not cover the table regions to export."""

    pass


class LayoutError(MailframeError):
    """Exception raised while walking or measuring the design tree."""

    pass


class RenderingError(MailframeError):
    """Exception raised while rendering a node into a fragment."""

    pass


class RasterizationError(RenderingError):
    """Exception raised when the host cannot rasterize a node."""

    pass


class FontError(MailframeError):
    """Exception raised when the host cannot load a font."""

    pass
