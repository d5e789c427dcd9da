"""
Pennsieve API Layer.

This package handles all communication with the Pennsieve REST API.
"""

from .client import PennsieveAPIClient

__all__ = ["PennsieveAPIClient"]
