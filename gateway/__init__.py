"""WebSocket gateway for trickrace matches."""

from .app import CommandLoop, ConnectionHub, create_app

__all__ = ["CommandLoop", "ConnectionHub", "create_app"]
