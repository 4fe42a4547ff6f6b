"""
Custom Exceptions

Application-specific exception classes for better error handling
and more informative error messages.

Source errors never leave a provider: the provider base class turns
them into an empty result. The boundary errors below are the only ones
the web layer translates into HTTP responses.
"""
from typing import Optional


class CampusMindError(Exception):
    """Base exception for all application errors."""
    pass


# === Data Source Errors ===

class SourceError(CampusMindError):
    """Base exception for data source errors."""
    def __init__(self, source_name: str, message: str):
        self.source_name = source_name
        self.message = message
        super().__init__(f"{source_name}: {message}")


class SourceTimeoutError(SourceError):
    """Data source timed out during request."""
    def __init__(self, source_name: str, timeout_seconds: float):
        super().__init__(source_name, f"Request timed out after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class SourceRateLimitError(SourceError):
    """Data source rate limit exceeded."""
    def __init__(self, source_name: str, retry_after: Optional[int] = None):
        msg = "Rate limit exceeded"
        if retry_after:
            msg += f", retry after {retry_after}s"
        super().__init__(source_name, msg)
        self.retry_after = retry_after


class SourceHTTPError(SourceError):
    """Data source returned an HTTP error status."""
    def __init__(self, source_name: str, status_code: int, detail: Optional[str] = None):
        msg = f"HTTP {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(source_name, msg)
        self.status_code = status_code


class SourceParseError(SourceError):
    """Failed to parse response from data source."""
    def __init__(self, source_name: str, detail: Optional[str] = None):
        msg = "Failed to parse response"
        if detail:
            msg += f": {detail}"
        super().__init__(source_name, msg)


# === Boundary Errors ===

class InvalidQueryError(CampusMindError):
    """Caller supplied an unusable search query."""
    def __init__(self, detail: str = "Search query must not be empty"):
        self.detail = detail
        super().__init__(detail)


class UnknownCareerError(CampusMindError):
    """Career with given ID is not part of the curated library."""
    def __init__(self, career_id: str):
        self.career_id = career_id
        super().__init__(f"Career not found: {career_id}")


class UsageLimitExceededError(CampusMindError):
    """The usage gate rejected an operation."""
    def __init__(self, operation: str, detail: Optional[str] = None):
        msg = f"Usage limit reached for {operation}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.operation = operation
        self.detail = detail


class ResourceImportError(CampusMindError):
    """The persistence collaborator could not import a resource."""
    def __init__(self, container_id: str, detail: Optional[str] = None):
        msg = f"Could not import resource into {container_id}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.container_id = container_id
        self.detail = detail
