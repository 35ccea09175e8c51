# sponsorship/middleware/__init__.py
from sponsorship.middleware.logging import RequestLoggingMiddleware
from sponsorship.middleware.session import SessionMiddleware

__all__ = ["RequestLoggingMiddleware", "SessionMiddleware"]
