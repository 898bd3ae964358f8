"""
WebSocket API module.

Provides the WebSocket router for the live meeting stream.
"""
from .router import router

__all__ = ["router"]
