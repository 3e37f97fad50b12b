#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/tidy.py
"""Public facade for configuring an HTML Tidy session.

:class:`Tidy` owns one engine handle. Its per-option accessor methods are
generated from the option registry, so each registered option has exactly
one typed, validated accessor named after it:

    >>> from tidyopts import AutoBool, CharEncoding, Tidy
    >>> with Tidy() as tidy:
    ...     tidy.output_xhtml(True)
    ...     tidy.indent(AutoBool.AUTO)
    ...     tidy.char_encoding(CharEncoding.UTF8)
    ...     tidy.indent_spaces(2)
    ...     tidy.doctype("html5")

Each accessor returns the changed flag: True when the engine's value was
altered, False when it already held the requested value.

Options can also be set by name, in bulk, or from a configuration file:

    >>> tidy.set("wrap", 100)
    >>> report = tidy.configure({"quiet": "yes", "newline": "lf"})
    >>> tidy = Tidy.from_config(".tidyopts.toml")

"""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from tidyopts.config import coerce_value, find_config_in_parents, load_config
from tidyopts.engine.base import TidyEngine
from tidyopts.engine.libtidy import LibTidyEngine
from tidyopts.exceptions import TidyOptsError
from tidyopts.handle import EngineHandle
from tidyopts.logging_utils import option_context
from tidyopts.registry import OptionDescriptor, ValueKind, registry
from tidyopts.setter import OptionRef, OptionSetter
from tidyopts.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


@dataclass
class ConfigureReport:
    """Outcome of :meth:`Tidy.configure`.

    Attributes
    ----------
    applied : dict[str, bool]
        Engine option name to changed flag, for every option that was set
    failures : dict[str, TidyOptsError]
        Engine option name (or the key as given, if it was unknown) to the
        error raised while setting it

    """

    applied: Dict[str, bool] = field(default_factory=dict)
    failures: Dict[str, TidyOptsError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def changed(self) -> list[str]:
        """Names of the options whose engine value was altered."""
        return [name for name, changed in self.applied.items() if changed]


class Tidy:
    """Typed, validated configuration surface for one engine session.

    Parameters
    ----------
    engine : TidyEngine, optional
        Engine to configure. Defaults to :class:`LibTidyEngine`.
    library_path : str, optional
        Path to the tidy shared library, used only when ``engine`` is None

    Raises
    ------
    EngineUnavailableError
        If no engine is given and libtidy cannot be loaded

    Notes
    -----
    An instance serializes its own setter calls. Distinct instances own
    distinct handles and may be used from different threads.

    """

    def __init__(self, engine: Optional[TidyEngine] = None, *, library_path: Optional[str] = None):
        if engine is None:
            engine = LibTidyEngine(library_path)
        self._handle = EngineHandle(engine)
        self._setter = OptionSetter(self._handle)
        self._finalizer = weakref.finalize(self, self._handle.close)

    @classmethod
    def from_config(
        cls,
        config_path: Optional[Union[str, Path]] = None,
        *,
        engine: Optional[TidyEngine] = None,
        library_path: Optional[str] = None,
        stop_on_error: bool = True,
    ) -> Tidy:
        """Create a session configured from a file.

        Parameters
        ----------
        config_path : str or Path, optional
            Configuration file. When None, the nearest one found by
            :func:`~tidyopts.config.find_config_in_parents` is used; if there is
            none the session keeps the engine defaults.
        engine, library_path
            As for the constructor
        stop_on_error : bool, default True
            Passed to :meth:`configure`

        """
        if config_path is None:
            config_path = find_config_in_parents()
        tidy = cls(engine, library_path=library_path)
        if config_path is None:
            logger.debug("No tidyopts configuration file found; using engine defaults")
            return tidy
        try:
            tidy.configure(load_config(config_path), stop_on_error=stop_on_error)
        except TidyOptsError:
            tidy.close()
            raise
        return tidy

    @property
    def closed(self) -> bool:
        return self._handle.closed

    @property
    def library_version(self) -> str:
        return self._handle.engine.library_version()

    def set(self, option: OptionRef, value: Any) -> bool:
        """Set an option by engine name, attribute name or descriptor.

        Returns
        -------
        bool
            The changed flag

        """
        return self._setter.set(option, value)

    def get(self, option: OptionRef) -> Any:
        """Read an option's current engine value."""
        return self._setter.get(option)

    def configure(self, options: Mapping[str, Any], *, stop_on_error: bool = True) -> ConfigureReport:
        """Apply several options in order.

        Values may be typed or spelled as in tidy configuration files
        (``"yes"``, ``"auto"``, ``"utf8"``). Options already applied are not
        rolled back when a later one fails.

        Parameters
        ----------
        options : Mapping[str, Any]
            Option names to values
        stop_on_error : bool, default True
            Raise the first error. When False, keep going and record every
            failure in the report.

        Returns
        -------
        ConfigureReport
            Changed flags and failures

        """
        report = ConfigureReport()
        with debug_timer(logger, f"Applying {len(options)} option(s)"):
            for key, raw in options.items():
                try:
                    descriptor = registry.describe(key)
                    report.applied[descriptor.name] = self._setter.set(descriptor, coerce_value(descriptor, raw))
                except TidyOptsError as e:
                    if stop_on_error:
                        raise
                    logger.warning(f"Could not set option '{key}': {e}", extra=option_context(str(key)))
                    report.failures[key] = e
        return report

    @staticmethod
    def describe(option: OptionRef) -> OptionDescriptor:
        return registry.describe(option)

    @staticmethod
    def options(kind: Optional[ValueKind] = None, category: Optional[str] = None) -> list[OptionDescriptor]:
        """List the registered options, optionally filtered."""
        return registry.list_options(kind=kind, category=category)

    def close(self) -> None:
        """Release the engine session. Idempotent."""
        self._finalizer()

    def __enter__(self) -> Tidy:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Tidy {type(self._handle.engine).__name__} {state}>"


_KIND_HINTS = {
    ValueKind.BOOL: "bool",
    ValueKind.AUTO_BOOL: "AutoBool, bool, or 0/1/2",
    ValueKind.ENUM_INT: "{choices}",
    ValueKind.BOUNDED_INT: "int in {choices}",
    ValueKind.FREE_INT: "non-negative int",
    ValueKind.STRING: "str",
}


def _make_accessor(descriptor: OptionDescriptor) -> Callable[[Tidy, Any], bool]:
    def accessor(self: Tidy, value: Any) -> bool:
        return self._setter.set(descriptor, value)

    legal = descriptor.legal_values
    choices = getattr(legal, "__name__", str(legal))
    accessor.__name__ = descriptor.attribute
    accessor.__qualname__ = f"Tidy.{descriptor.attribute}"
    accessor.__doc__ = (
        f"{descriptor.help}.\n\n"
        f"Sets engine option ``{descriptor.name}``; value: {_KIND_HINTS[descriptor.kind].format(choices=choices)}.\n"
        "Returns True if the engine value changed, False if it was already set."
    )
    return accessor


for _descriptor in registry:
    if hasattr(Tidy, _descriptor.attribute):
        raise RuntimeError(f"Option accessor '{_descriptor.attribute}' would shadow a Tidy attribute")
    setattr(Tidy, _descriptor.attribute, _make_accessor(_descriptor))
del _descriptor
