"""depwalk: Multi-provider dependency graph resolution with lock snapshot validation."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
