"""
API Routers
===========
Each router handles a specific domain of the API.
"""
from . import health, inspect

__all__ = ["health", "inspect"]
