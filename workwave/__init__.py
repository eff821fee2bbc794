"""
WorkWave - Three-layer client for the WorkWave Route Manager API.

Layers:
- core: Raw types and HTTP client
- sdk: High-level WorkWaveClient with per-resource operations
- cli: Command-line interface
"""

import logging

from workwave.core.client import CallbackError
from workwave.sdk import WorkWaveClient

__version__ = "0.1.0"
__all__ = ["CallbackError", "WorkWaveClient"]

logging.getLogger(__name__).addHandler(logging.NullHandler())
