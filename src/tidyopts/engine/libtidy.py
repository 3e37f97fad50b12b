#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/engine/libtidy.py
"""ctypes binding of the engine contract against the HTML Tidy shared library.

Only the option API of ``libtidy`` is bound here: session lifecycle, option
lookup by name, the three option setters and their getters, and the error
buffer used for diagnostics. Parsing and cleaning entry points are outside
this package's concern.

The library is located through, in order:

1. the ``TIDYOPTS_LIBRARY`` environment variable
2. an explicit ``library_path`` argument
3. ``ctypes.util.find_library`` for each name in ``LIBTIDY_NAMES``

"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import os
from typing import Any, Optional

from packaging.version import InvalidVersion, Version

from tidyopts.constants import LIBTIDY_ENV_VAR, LIBTIDY_NAMES, MIN_LIBTIDY_VERSION, NATIVE_TEXT_ENCODING
from tidyopts.engine.base import DiagnosticSink, TidyEngine
from tidyopts.exceptions import EngineError, EngineUnavailableError

logger = logging.getLogger(__name__)

# Tidy's Bool is a C enum: no = 0, yes = 1
_TIDY_NO = 0
_TIDY_YES = 1


class TidyBuffer(ctypes.Structure):
    """Mirror of ``struct _TidyBuffer`` from ``tidybuffio.h``."""

    _fields_ = [
        ("allocator", ctypes.c_void_p),
        ("bp", ctypes.POINTER(ctypes.c_ubyte)),
        ("size", ctypes.c_uint),
        ("allocated", ctypes.c_uint),
        ("next", ctypes.c_uint),
    ]


def find_libtidy(library_path: Optional[str] = None) -> ctypes.CDLL:
    """Load the tidy shared library.

    Parameters
    ----------
    library_path : str, optional
        Explicit path or name of the library. The ``TIDYOPTS_LIBRARY``
        environment variable takes precedence when set.

    Returns
    -------
    ctypes.CDLL
        The loaded library

    Raises
    ------
    EngineUnavailableError
        If no candidate could be loaded

    """
    candidates: list[str] = []
    env_path = os.environ.get(LIBTIDY_ENV_VAR)
    if env_path:
        candidates.append(env_path)
    if library_path:
        candidates.append(library_path)
    for name in LIBTIDY_NAMES:
        found = ctypes.util.find_library(name)
        if found:
            candidates.append(found)

    last_error: Optional[OSError] = None
    for candidate in candidates:
        try:
            lib = ctypes.CDLL(candidate)
        except OSError as e:
            logger.debug(f"Could not load tidy library from {candidate}: {e}")
            last_error = e
            continue
        logger.debug(f"Loaded tidy library from {candidate}")
        return lib

    tried = ", ".join(candidates) if candidates else "none found"
    raise EngineUnavailableError(
        f"HTML Tidy shared library could not be loaded (candidates: {tried}). "
        f"Install libtidy or set {LIBTIDY_ENV_VAR} to its path.",
        library_path=library_path or env_path,
        original_error=last_error,
    )


def _bind(lib: ctypes.CDLL) -> None:
    """Declare argument and return types for the functions used."""
    doc = ctypes.c_void_p
    option_id = ctypes.c_int
    tidy_bool = ctypes.c_int
    buffer_p = ctypes.POINTER(TidyBuffer)

    signatures: dict[str, tuple[list[Any], Any]] = {
        "tidyCreate": ([], doc),
        "tidyRelease": ([doc], None),
        "tidyGetOptionByName": ([doc, ctypes.c_char_p], ctypes.c_void_p),
        "tidyOptGetId": ([ctypes.c_void_p], option_id),
        "tidyOptSetBool": ([doc, option_id, tidy_bool], tidy_bool),
        "tidyOptSetInt": ([doc, option_id, ctypes.c_ulong], tidy_bool),
        "tidyOptSetValue": ([doc, option_id, ctypes.c_char_p], tidy_bool),
        "tidyOptGetBool": ([doc, option_id], tidy_bool),
        "tidyOptGetInt": ([doc, option_id], ctypes.c_ulong),
        "tidyOptGetValue": ([doc, option_id], ctypes.c_char_p),
        "tidySetErrorBuffer": ([doc, buffer_p], ctypes.c_int),
        "tidyBufInit": ([buffer_p], None),
        "tidyBufClear": ([buffer_p], None),
        "tidyBufFree": ([buffer_p], None),
    }
    for name, (argtypes, restype) in signatures.items():
        try:
            function = getattr(lib, name)
        except AttributeError as e:
            raise EngineUnavailableError(f"Tidy library does not export {name}", original_error=e) from e
        function.argtypes = argtypes
        function.restype = restype


class LibTidyDiagnostics(DiagnosticSink):
    """Diagnostic sink backed by a ``TidyBuffer`` registered as the error buffer."""

    def __init__(self, lib: ctypes.CDLL, attached: bool):
        self._lib = lib
        self.buffer = TidyBuffer()
        self._lib.tidyBufInit(ctypes.byref(self.buffer))
        self.attached = attached
        self._released = False

    def read(self) -> Optional[str]:
        if self._released or not self.buffer.bp or self.buffer.size == 0:
            return None
        raw = ctypes.string_at(self.buffer.bp, self.buffer.size)
        return raw.decode(NATIVE_TEXT_ENCODING, errors="replace")

    def clear(self) -> None:
        if not self._released:
            self._lib.tidyBufClear(ctypes.byref(self.buffer))

    def release(self) -> None:
        if not self._released:
            self._lib.tidyBufFree(ctypes.byref(self.buffer))
            self._released = True


class LibTidyEngine(TidyEngine):
    """Engine contract implemented over ``libtidy`` with ctypes.

    Parameters
    ----------
    library_path : str, optional
        Explicit path or name of the shared library
    min_version : str, default MIN_LIBTIDY_VERSION
        Oldest accepted ``tidyLibraryVersion()``

    Raises
    ------
    EngineUnavailableError
        If the library cannot be loaded, lacks a required symbol, or is older
        than ``min_version``

    """

    def __init__(self, library_path: Optional[str] = None, min_version: str = MIN_LIBTIDY_VERSION):
        self._lib = find_libtidy(library_path)
        _bind(self._lib)
        self._version = self._read_version()
        self._check_version(min_version)

    def _read_version(self) -> str:
        version_fn = getattr(self._lib, "tidyLibraryVersion", None)
        if version_fn is None:
            return "0"
        version_fn.argtypes = []
        version_fn.restype = ctypes.c_char_p
        raw = version_fn()
        return raw.decode("ascii", errors="replace") if raw else "0"

    def _check_version(self, min_version: str) -> None:
        try:
            too_old = Version(self._version) < Version(min_version)
        except InvalidVersion as e:
            raise EngineUnavailableError(f"Unrecognised tidy library version '{self._version}'", original_error=e) from e
        if too_old:
            raise EngineUnavailableError(
                f"Tidy library version {self._version} is older than the required {min_version}"
            )

    def library_version(self) -> str:
        return self._version

    def create_handle(self) -> Any:
        handle = self._lib.tidyCreate()
        if not handle:
            raise EngineError("tidyCreate() returned NULL")
        return handle

    def destroy_handle(self, handle: Any) -> None:
        self._lib.tidyRelease(handle)

    def resolve_option(self, handle: Any, name: str) -> Optional[int]:
        option = self._lib.tidyGetOptionByName(handle, name.encode("ascii"))
        if not option:
            return None
        return self._lib.tidyOptGetId(option)

    def set_bool(self, handle: Any, option_id: Any, value: int) -> bool:
        return self._lib.tidyOptSetBool(handle, option_id, _TIDY_YES if value else _TIDY_NO) == _TIDY_YES

    def set_int(self, handle: Any, option_id: Any, value: int) -> bool:
        return self._lib.tidyOptSetInt(handle, option_id, value) == _TIDY_YES

    def set_string(self, handle: Any, option_id: Any, value: Any) -> bool:
        return self._lib.tidyOptSetValue(handle, option_id, value) == _TIDY_YES

    def get_bool(self, handle: Any, option_id: Any) -> bool:
        return self._lib.tidyOptGetBool(handle, option_id) == _TIDY_YES

    def get_int(self, handle: Any, option_id: Any) -> int:
        return int(self._lib.tidyOptGetInt(handle, option_id))

    def get_string(self, handle: Any, option_id: Any) -> Optional[str]:
        raw = self._lib.tidyOptGetValue(handle, option_id)
        if raw is None:
            return None
        return raw.decode(NATIVE_TEXT_ENCODING, errors="replace")

    def attach_diagnostics(self, handle: Any) -> LibTidyDiagnostics:
        sink = LibTidyDiagnostics(self._lib, attached=False)
        status = self._lib.tidySetErrorBuffer(handle, ctypes.byref(sink.buffer))
        if status != 0:
            logger.warning(f"tidySetErrorBuffer failed with status {status}; diagnostics will be unavailable")
        else:
            sink.attached = True
        return sink

    def encode_text(self, value: str) -> ctypes.Array:
        encoded = value.encode(NATIVE_TEXT_ENCODING)
        if b"\x00" in encoded:
            raise ValueError("text contains an embedded NUL character")
        return ctypes.create_string_buffer(encoded)

    def release_text(self, native: Any) -> None:
        """Drop the engine's use of ``native``.

        libtidy copies option values on set, and the ctypes buffer is freed
        when its last reference goes away, so there is nothing to free here.
        """
