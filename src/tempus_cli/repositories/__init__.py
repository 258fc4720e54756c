"""Gateway interfaces."""

from .repository import TaskGateway

__all__ = ["TaskGateway"]
