"""Gateway adapters."""

from .rest_api import RestApiGateway

__all__ = ["RestApiGateway"]
