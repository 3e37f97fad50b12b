#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Native engine bindings used by the tidyopts option setters."""

from tidyopts.engine.base import DiagnosticSink, TidyEngine, native_text
from tidyopts.engine.libtidy import LibTidyEngine, find_libtidy

__all__ = [
    "DiagnosticSink",
    "LibTidyEngine",
    "TidyEngine",
    "find_libtidy",
    "native_text",
]
