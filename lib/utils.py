# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Error base class and small text helpers shared by app/, core/ and lib/.
# =============================================================================

from typing import Any


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Root of the service's own exceptions.

    `code` is a stable machine-readable tag, `message` is shown to callers,
    `suggestion` is an optional hint and `details` holds structured context.
    Subclasses pin the code:

        class SupabaseClientError(ApplicationError):
            def __init__(self, message, code="SUPABASE_ERROR", **kw):
                super().__init__(message, code=code, **kw)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        return f"{text} ({self.suggestion})" if self.suggestion else text

    def to_dict(self) -> dict[str, Any]:
        """Convert error to the API error body shape."""
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.suggestion:
            body["suggestion"] = self.suggestion
        if self.details:
            body["details"] = self.details
        return body


# =============================================================================
# Text Helpers
# =============================================================================

def first_non_empty(*values: str | None) -> str | None:
    """
    Return the first value that is a non-blank string.

    Provider payloads often send "" instead of omitting a field, so a plain
    `a or b` chain is not enough when whitespace-only values show up.

    Example:
        first_non_empty(None, "  ", "Rick Astley")  # "Rick Astley"
    """
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
