#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/handle.py
"""Ownership of one native engine session and its diagnostic buffer.

An :class:`EngineHandle` creates its native session on construction and
attaches a diagnostic buffer to it immediately, so the very first rejected
call on a fresh handle can already report the engine's reason. The session
and the buffer are released exactly once, by :meth:`EngineHandle.close` or on
leaving a ``with`` block.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from tidyopts.engine.base import DiagnosticSink, TidyEngine
from tidyopts.exceptions import HandleClosedError, UnsupportedOptionError

logger = logging.getLogger(__name__)


class DiagnosticBuffer:
    """Handle-owned view over the engine's diagnostic sink.

    The text is trustworthy only directly after a failing call on the owning
    handle, so the setter clears the buffer before each engine call and takes
    its content right after a refusal.
    """

    def __init__(self, sink: DiagnosticSink):
        self._sink = sink

    def reset(self) -> None:
        """Discard any text left over from earlier calls."""
        self._sink.clear()

    def take(self) -> Optional[str]:
        """Copy the current text out and clear the buffer.

        Returns
        -------
        str or None
            The diagnostic text, or None if the engine wrote nothing

        """
        text = self._sink.read()
        self._sink.clear()
        return text

    def release(self) -> None:
        self._sink.release()


class EngineHandle:
    """One live engine session.

    Parameters
    ----------
    engine : TidyEngine
        Engine that creates and destroys the native session

    Attributes
    ----------
    engine : TidyEngine
        The engine this handle belongs to
    diagnostics : DiagnosticBuffer
        Diagnostic buffer attached to the session

    Examples
    --------
        >>> with EngineHandle(engine) as handle:
        ...     option_id = handle.option_id("indent")

    """

    def __init__(self, engine: TidyEngine):
        self.engine = engine
        self._native: Any = engine.create_handle()
        try:
            self.diagnostics = DiagnosticBuffer(engine.attach_diagnostics(self._native))
        except BaseException:
            engine.destroy_handle(self._native)
            raise
        self._option_ids: dict[str, Any] = {}
        self._closed = False
        logger.debug(f"Created engine handle using {type(engine).__name__}")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def native(self) -> Any:
        """The engine's native session.

        Raises
        ------
        HandleClosedError
            If the handle has been closed

        """
        if self._closed:
            raise HandleClosedError()
        return self._native

    def option_id(self, name: str) -> Any:
        """Resolve and cache the engine's id for option ``name``.

        Raises
        ------
        UnsupportedOptionError
            If the engine does not know the option
        HandleClosedError
            If the handle has been closed

        """
        native = self.native
        if name not in self._option_ids:
            option_id = self.engine.resolve_option(native, name)
            if option_id is None:
                raise UnsupportedOptionError(name)
            self._option_ids[name] = option_id
        return self._option_ids[name]

    def close(self) -> None:
        """Destroy the native session and free the diagnostic buffer. Idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            self.engine.destroy_handle(self._native)
        finally:
            self.diagnostics.release()
            self._native = None
        logger.debug("Closed engine handle")

    def __enter__(self) -> EngineHandle:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<EngineHandle {type(self.engine).__name__} {state}>"
