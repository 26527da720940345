"""Public schema exports."""

from .records import EndpointRequest, NormalizedRecord

__all__ = ["EndpointRequest", "NormalizedRecord"]
