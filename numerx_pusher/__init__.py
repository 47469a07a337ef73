"""
numerx_pusher package marker.
"""

__version__ = "0.9"
