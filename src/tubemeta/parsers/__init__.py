"""
Low-level parsers for YouTube watch-page markup.

Modules
-------
document_scanner
    Balanced JSON object extraction by brace-counting.
variable_locator
    Marker-based location of ``ytInitialPlayerResponse``, ``ytInitialData``
    and ``ytcfg`` objects.
structured_tree
    Schema-free JSON tree with safe path lookups.
"""

from __future__ import annotations

from tubemeta.parsers.document_scanner import scan_balanced_object
from tubemeta.parsers.structured_tree import StructuredTree, TreeKind, parse_tree
from tubemeta.parsers.variable_locator import (
    extract_string_field,
    locate_initial_data,
    locate_object,
    locate_player_response,
    locate_ytcfg,
)

__all__ = [
    "StructuredTree",
    "TreeKind",
    "extract_string_field",
    "locate_initial_data",
    "locate_object",
    "locate_player_response",
    "locate_ytcfg",
    "parse_tree",
    "scan_balanced_object",
]
