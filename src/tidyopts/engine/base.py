#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/engine/base.py
"""Abstract contract between tidyopts and a native markup engine.

The facade consumes the engine only through :class:`TidyEngine`. The real
implementation is :class:`tidyopts.engine.libtidy.LibTidyEngine`; tests use an
in-process double implementing the same methods.

Engine handles and option ids are opaque to everything above this module:
they are created, passed back in, and never inspected.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Generator, Optional

from tidyopts.exceptions import MarshalError
from tidyopts.logging_utils import option_context

logger = logging.getLogger(__name__)


class DiagnosticSink(ABC):
    """Engine-owned scratch region receiving rejection explanations.

    A sink is attached to exactly one native handle. Its content is only
    meaningful immediately after a failing call on that handle and is
    overwritten by later calls, so callers copy it out with :meth:`read`.
    """

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the text currently held, or None if the sink is empty or unreadable."""

    @abstractmethod
    def clear(self) -> None:
        """Discard the text currently held."""

    @abstractmethod
    def release(self) -> None:
        """Free the sink's storage. Called once, when its handle is destroyed."""


class TidyEngine(ABC):
    """Narrow native interface the option setters are written against.

    All ``set_*`` methods return True when the engine accepted the value and
    False when it refused it; they never raise for a refusal.
    """

    @abstractmethod
    def create_handle(self) -> Any:
        """Create a new native configuration session."""

    @abstractmethod
    def destroy_handle(self, handle: Any) -> None:
        """Release a native session created by :meth:`create_handle`."""

    @abstractmethod
    def resolve_option(self, handle: Any, name: str) -> Optional[Any]:
        """Map an engine option name to the engine's option id, or None if unknown."""

    @abstractmethod
    def set_bool(self, handle: Any, option_id: Any, value: int) -> bool:
        """Set a boolean option to 0 or 1."""

    @abstractmethod
    def set_int(self, handle: Any, option_id: Any, value: int) -> bool:
        """Set an integer option to an unsigned value."""

    @abstractmethod
    def set_string(self, handle: Any, option_id: Any, value: Any) -> bool:
        """Set a string option from native text produced by :meth:`encode_text`."""

    @abstractmethod
    def get_bool(self, handle: Any, option_id: Any) -> bool:
        """Read the current value of a boolean option."""

    @abstractmethod
    def get_int(self, handle: Any, option_id: Any) -> int:
        """Read the current value of an integer option."""

    @abstractmethod
    def get_string(self, handle: Any, option_id: Any) -> Optional[str]:
        """Read the current value of a string option; None when unset."""

    @abstractmethod
    def attach_diagnostics(self, handle: Any) -> DiagnosticSink:
        """Associate a fresh diagnostic sink with ``handle``."""

    @abstractmethod
    def encode_text(self, value: str) -> Any:
        """Allocate native text holding ``value``.

        Raises
        ------
        UnicodeEncodeError
            If ``value`` cannot be represented in the native encoding
        ValueError
            If ``value`` contains characters the native side cannot carry

        """

    @abstractmethod
    def release_text(self, native: Any) -> None:
        """Release native text allocated by :meth:`encode_text`."""

    def library_version(self) -> str:
        """Return the engine's version string."""
        return "unknown"


@contextmanager
def native_text(engine: TidyEngine, option_name: str, value: str) -> Generator[Any, None, None]:
    """Marshal ``value`` for the engine and release it on every exit path.

    Parameters
    ----------
    engine : TidyEngine
        Engine that allocates and releases the native text
    option_name : str
        Option being set, for error reporting
    value : str
        Text to marshal

    Yields
    ------
    Any
        The engine's native text object, valid only inside the block

    Raises
    ------
    MarshalError
        If the engine cannot encode ``value``. Nothing is allocated in that case.

    """
    try:
        native = engine.encode_text(value)
    except (UnicodeError, ValueError) as e:
        raise MarshalError(option_name, f"Cannot marshal value for option '{option_name}': {e}", original_error=e) from e

    try:
        yield native
    finally:
        engine.release_text(native)
        logger.debug(f"Released native text for option '{option_name}'", extra=option_context(option_name))
