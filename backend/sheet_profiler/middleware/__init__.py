"""Sheet Profiler middleware — error handling, request logging, rate limiting."""

from .error_handler import ErrorHandlerMiddleware
from .request_logger import RequestLoggerMiddleware
from .rate_limiter import RateLimiterMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RequestLoggerMiddleware",
    "RateLimiterMiddleware",
]
