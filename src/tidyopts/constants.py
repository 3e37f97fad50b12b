#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and closed enumerations for tidyopts.

This module centralizes the value domains of the engine's enumerated options
and the handful of magic numbers the facade needs. Each option family gets
its own ``IntEnum`` so that a code from one family can never be passed where
another family is expected.

Constants are organized by category:
1. Option value enumerations - one closed enumeration per option family
2. Engine limits - integer width of the native setters
3. Library discovery - shared library names and environment variables
4. Configuration files - file names searched by ``tidyopts.config``
"""

from __future__ import annotations

import ctypes
from enum import IntEnum

# =============================================================================
# Option Value Enumerations
# =============================================================================


class TidyChoice(IntEnum):
    """Base class for enumerations whose members have a tidy config spelling.

    Tidy configuration files spell choices in lower case with hyphens
    (``keep-first``, ``utf8``). ``from_text`` accepts that spelling, the
    member name, or the integer code.
    """

    @property
    def text(self) -> str:
        """Return the tidy config spelling of this member."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_text(cls, text: str) -> TidyChoice:
        """Look up a member by its config spelling or integer code.

        Raises
        ------
        ValueError
            If ``text`` does not name a member of this enumeration.

        """
        normalized = text.strip().lower().replace("_", "-")
        for member in cls:
            if member.text == normalized:
                return member
        if normalized.isdigit():
            return cls(int(normalized))
        raise ValueError(f"{text!r} is not a valid {cls.__name__}")

    @classmethod
    def domain(cls) -> str:
        """Return the legal integer codes formatted as a set, e.g. ``{0, 1, 2}``."""
        return "{" + ", ".join(str(int(member)) for member in cls) + "}"


class AutoBool(TidyChoice):
    """Tri-state value for options that accept ``no``, ``yes`` or ``auto``."""

    NO = 0
    YES = 1
    AUTO = 2


class AccessibilityLevel(TidyChoice):
    """Accessibility checking priority level."""

    TIDY_CLASSIC = 0
    PRIORITY_1 = 1
    PRIORITY_2 = 2
    PRIORITY_3 = 3


class CharEncoding(TidyChoice):
    """Character encodings understood by the engine's encoding options."""

    RAW = 0
    ASCII = 1
    LATIN0 = 2
    LATIN1 = 3
    UTF8 = 4
    ISO2022 = 5
    MAC = 6
    WIN1252 = 7
    IBM858 = 8
    UTF16LE = 9
    UTF16BE = 10
    UTF16 = 11
    BIG5 = 12
    SHIFTJIS = 13


class Newline(TidyChoice):
    """Line ending written by the engine."""

    LF = 0
    CRLF = 1
    CR = 2


class RepeatedAttributes(TidyChoice):
    """Which occurrence wins when an attribute is repeated on an element."""

    KEEP_FIRST = 0
    KEEP_LAST = 1


class SortAttributes(TidyChoice):
    """Attribute ordering applied on output."""

    NONE = 0
    ALPHA = 1


class UppercaseAttributes(TidyChoice):
    """Case of attribute names on output; ``preserve`` keeps the input spelling."""

    NO = 0
    YES = 1
    PRESERVE = 2


# =============================================================================
# Engine Limits
# =============================================================================

# Integer options travel through the engine as C ``unsigned long``
ENGINE_UINT_MIN = 0
ENGINE_UINT_MAX = 2 ** (8 * ctypes.sizeof(ctypes.c_ulong)) - 1

# Text options are marshalled with this encoding
NATIVE_TEXT_ENCODING = "utf-8"

# Oldest libtidy release exposing the option API this package binds
MIN_LIBTIDY_VERSION = "5.0.0"

# =============================================================================
# Library Discovery
# =============================================================================

LIBTIDY_ENV_VAR = "TIDYOPTS_LIBRARY"
LIBTIDY_NAMES = ["tidy", "tidy5", "libtidy"]

# Parent of every module logger in the package
LOGGER_NAME = "tidyopts"

# =============================================================================
# Configuration Files
# =============================================================================

CONFIG_FILENAMES = [".tidyopts.toml", ".tidyopts.yaml", ".tidyopts.yml", ".tidyopts.json"]
PYPROJECT_TOOL_SECTION = "tidyopts"

TRUE_WORDS = frozenset({"yes", "y", "true", "t", "on", "1"})
FALSE_WORDS = frozenset({"no", "n", "false", "f", "off", "0"})
AUTO_WORDS = frozenset({"auto", "2"})
