"""
Command-line interface for tubemeta.
"""

from __future__ import annotations

__all__: list[str] = []
