"""
Middleware for the registry API.

Request timeouts and correlation IDs; both are installed in main.py.
"""

from src.presentation.middleware.correlation import (CorrelationIDMiddleware,
                                                     get_correlation_id)
from src.presentation.middleware.timeout import TimeoutMiddleware

__all__ = ["CorrelationIDMiddleware", "TimeoutMiddleware", "get_correlation_id"]
