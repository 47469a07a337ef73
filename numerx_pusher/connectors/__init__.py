"""
numerx_pusher/connectors package marker.
"""

from numerx_pusher.connectors.base import BaseConnector, HTTPResult
from numerx_pusher.connectors.numerx_client import NumerXClient

__all__ = [
    "BaseConnector",
    "HTTPResult",
    "NumerXClient",
]
