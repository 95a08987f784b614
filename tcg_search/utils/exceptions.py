from typing import Optional


class CardSearchError(Exception):
    """Base exception for card search errors"""
    status_code = 500


class InvalidRequestError(CardSearchError):
    """Raised when a search request is missing required input"""
    status_code = 400


class UpstreamError(CardSearchError):
    """Raised when the fallback card API cannot answer a request"""

    def __init__(self, message: str, status_code: int = 502, upstream: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.upstream = upstream


class UpstreamTimeoutError(UpstreamError):
    """Raised when the fallback card API does not answer in time"""

    def __init__(self, message: str = "Upstream request timed out"):
        super().__init__(message, status_code=504)
