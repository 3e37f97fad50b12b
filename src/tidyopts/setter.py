#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/setter.py
"""Option dispatch and validation.

Every typed setter validates its value locally, converts it into the form the
engine expects, and hands it to one of the four primitives that talk to the
engine: boolean, integer, auto-boolean (through the integer path) and
string. Validation failures never reach the engine. Engine refusals are
raised as :class:`~tidyopts.exceptions.EngineRejectedError` carrying the
diagnostic text copied out of the handle's buffer, when there is any.

All setters return a *changed* flag: True when the engine's value was
altered, False when it already held the requested value. Both outcomes are
successes.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Union

from tidyopts.constants import ENGINE_UINT_MAX, ENGINE_UINT_MIN, AutoBool, TidyChoice
from tidyopts.engine.base import native_text
from tidyopts.exceptions import EngineRejectedError, OptionTypeError, OutOfRangeError
from tidyopts.handle import EngineHandle
from tidyopts.logging_utils import option_context
from tidyopts.registry import IntRange, OptionDescriptor, OptionRegistry, ValueKind, registry

logger = logging.getLogger(__name__)

OptionRef = Union[str, OptionDescriptor]

_UINT_RANGE = IntRange(ENGINE_UINT_MIN, ENGINE_UINT_MAX)


class OptionSetter:
    """Validating setters bound to one engine handle.

    Calls are serialized with a per-instance lock: the handle's diagnostic
    buffer is shared by every call, so at most one call may be in flight.

    Parameters
    ----------
    handle : EngineHandle
        Live handle the options are applied to
    options : OptionRegistry, optional
        Registry used to resolve option names. Defaults to the global registry.

    """

    def __init__(self, handle: EngineHandle, options: Optional[OptionRegistry] = None):
        self.handle = handle
        self._registry = options if options is not None else registry
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Typed setters
    # ------------------------------------------------------------------

    def set_bool(self, option: OptionRef, value: bool) -> bool:
        """Set a boolean option.

        Parameters
        ----------
        option : str or OptionDescriptor
            A ``BOOL`` option
        value : bool
            The new value

        Returns
        -------
        bool
            True if the engine value changed, False if it already held ``value``

        Raises
        ------
        OptionTypeError
            If the option is not boolean or ``value`` is not a bool
        EngineRejectedError
            If the engine refuses the value

        """
        descriptor = self._descriptor(option, ValueKind.BOOL)
        if not isinstance(value, bool):
            raise OptionTypeError(
                f"Option '{descriptor.name}' expects a bool, got {type(value).__name__}",
                option_name=descriptor.name,
                option_value=value,
            )
        engine = self.handle.engine
        return self._apply(descriptor, value, lambda native, option_id: engine.set_bool(native, option_id, int(value)))

    def set_auto_bool(self, option: OptionRef, value: Union[AutoBool, bool, int]) -> bool:
        """Set a tri-state option to ``no``, ``yes`` or ``auto``.

        ``value`` may be an :class:`AutoBool`, a bool, or one of the integer
        codes 0, 1, 2. Anything else is refused before the engine is called.

        Raises
        ------
        OutOfRangeError
            If an integer outside ``{0, 1, 2}`` is given
        OptionTypeError
            If the option is not tri-state, or ``value`` belongs to another
            enumeration or is not an integer

        """
        descriptor = self._descriptor(option, ValueKind.AUTO_BOOL)
        if isinstance(value, bool):
            code = AutoBool.YES if value else AutoBool.NO
        else:
            code = self._check_choice(descriptor, value)
        return self._set_uint(descriptor, int(code))

    def set_enum_int(self, option: OptionRef, value: Union[TidyChoice, int]) -> bool:
        """Set an enumerated or bounded integer option.

        Raises
        ------
        OutOfRangeError
            If ``value`` is not in the option's legal set or range. The
            message names the legal values.
        OptionTypeError
            If the option is not enumerated/bounded, or ``value`` is a member
            of a different enumeration

        """
        descriptor = self._descriptor(option, ValueKind.ENUM_INT, ValueKind.BOUNDED_INT)
        code = self._check_choice(descriptor, value)
        return self._set_uint(descriptor, int(code))

    def set_int(self, option: OptionRef, value: int) -> bool:
        """Set an unconstrained integer option.

        The engine stores integers as C ``unsigned long``; values outside
        that width are refused locally.

        Raises
        ------
        OutOfRangeError
            If ``value`` is negative or too large for the engine
        OptionTypeError
            If the option is not an integer option or ``value`` is not an int

        """
        descriptor = self._descriptor(option, ValueKind.FREE_INT)
        self._check_int_type(descriptor, value)
        if value not in _UINT_RANGE:
            raise OutOfRangeError(descriptor.name, value, str(_UINT_RANGE))
        return self._set_uint(descriptor, value)

    def set_string(self, option: OptionRef, value: str) -> bool:
        """Set a string option.

        The text is marshalled into native storage that is released on every
        exit path, whether the engine accepts the value or not.

        Raises
        ------
        MarshalError
            If ``value`` cannot be encoded for the engine
        OptionTypeError
            If the option is not a string option or ``value`` is not a str
        EngineRejectedError
            If the engine refuses the value

        """
        descriptor = self._descriptor(option, ValueKind.STRING)
        if not isinstance(value, str):
            raise OptionTypeError(
                f"Option '{descriptor.name}' expects a str, got {type(value).__name__}",
                option_name=descriptor.name,
                option_value=value,
            )
        engine = self.handle.engine
        with self._lock, native_text(engine, descriptor.name, value) as text:
            return self._apply(descriptor, value, lambda native, option_id: engine.set_string(native, option_id, text))

    def set(self, option: OptionRef, value: Any) -> bool:
        """Dispatch to the typed setter matching the option's kind."""
        descriptor = self._registry.describe(option)
        if descriptor.kind is ValueKind.BOOL:
            return self.set_bool(descriptor, value)
        if descriptor.kind is ValueKind.AUTO_BOOL:
            return self.set_auto_bool(descriptor, value)
        if descriptor.kind in (ValueKind.ENUM_INT, ValueKind.BOUNDED_INT):
            return self.set_enum_int(descriptor, value)
        if descriptor.kind is ValueKind.FREE_INT:
            return self.set_int(descriptor, value)
        return self.set_string(descriptor, value)

    # ------------------------------------------------------------------
    # Read-back
    # ------------------------------------------------------------------

    def get(self, option: OptionRef) -> Any:
        """Read an option's current value from the engine, decoded by kind.

        Returns
        -------
        bool, AutoBool, TidyChoice, int or str or None
            Enumerated codes the engine reports outside the declared domain are
            returned as plain ints.

        """
        descriptor = self._registry.describe(option)
        with self._lock:
            raw = self._read(descriptor, self.handle.option_id(descriptor.name))
        if descriptor.kind in (ValueKind.AUTO_BOOL, ValueKind.ENUM_INT):
            try:
                return descriptor.legal_values(raw)  # type: ignore[misc,operator]
            except ValueError:
                return raw
        return raw

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _descriptor(self, option: OptionRef, *kinds: ValueKind) -> OptionDescriptor:
        descriptor = self._registry.describe(option)
        if descriptor.kind not in kinds:
            expected = " or ".join(kind.value for kind in kinds)
            raise OptionTypeError(
                f"Option '{descriptor.name}' is of kind {descriptor.kind.value}, not {expected}",
                option_name=descriptor.name,
            )
        return descriptor

    @staticmethod
    def _check_int_type(descriptor: OptionDescriptor, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise OptionTypeError(
                f"Option '{descriptor.name}' expects an int, got {type(value).__name__}",
                option_name=descriptor.name,
                option_value=value,
            )

    def _check_choice(self, descriptor: OptionDescriptor, value: Any) -> int:
        """Validate ``value`` against the descriptor's closed domain and return its code."""
        self._check_int_type(descriptor, value)
        legal = descriptor.legal_values
        if isinstance(value, TidyChoice) and not (isinstance(legal, type) and isinstance(value, legal)):
            raise OptionTypeError(
                f"Option '{descriptor.name}' does not accept {type(value).__name__}.{value.name}",
                option_name=descriptor.name,
                option_value=value,
            )
        if not descriptor.accepts(value):
            raise OutOfRangeError(descriptor.name, value, descriptor.domain or "")
        return int(value)

    def _set_uint(self, descriptor: OptionDescriptor, value: int) -> bool:
        engine = self.handle.engine
        return self._apply(descriptor, value, lambda native, option_id: engine.set_int(native, option_id, value))

    def _read(self, descriptor: OptionDescriptor, option_id: Any) -> Any:
        engine = self.handle.engine
        native = self.handle.native
        if descriptor.kind is ValueKind.BOOL:
            return engine.get_bool(native, option_id)
        if descriptor.kind is ValueKind.STRING:
            return engine.get_string(native, option_id)
        return engine.get_int(native, option_id)

    def _apply(self, descriptor: OptionDescriptor, value: Any, call: Callable[[Any, Any], bool]) -> bool:
        """Run one engine set call and translate its outcome."""
        with self._lock:
            option_id = self.handle.option_id(descriptor.name)
            before = self._read(descriptor, option_id)
            self.handle.diagnostics.reset()
            if not call(self.handle.native, option_id):
                diagnostic = self.handle.diagnostics.take()
                logger.warning(
                    f"Engine rejected {value!r} for '{descriptor.name}': {diagnostic or 'no diagnostic'}",
                    extra=option_context(descriptor.name),
                )
                raise EngineRejectedError(descriptor.name, value, diagnostic)
            changed = self._read(descriptor, option_id) != before
        logger.debug(f"Set '{descriptor.name}' = {value!r} (changed={changed})", extra=option_context(descriptor.name))
        return changed
