"""
HTTP transport abstraction for the vendor API.
"""

from frontegg.http.client import HttpClient, HttpxHttpClient, SUPPORTED_METHODS, normalize_method
from frontegg.http.response import ApiError, ApiRawResponse

__all__ = [
    "ApiError",
    "ApiRawResponse",
    "HttpClient",
    "HttpxHttpClient",
    "SUPPORTED_METHODS",
    "normalize_method",
]
