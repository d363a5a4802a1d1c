"""ASGI middleware."""

from .gate import RequestGateMiddleware

__all__ = ["RequestGateMiddleware"]
