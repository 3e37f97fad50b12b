"""tidyopts - a typed configuration facade for the HTML Tidy engine.

tidyopts lets a program configure ``libtidy`` through typed, validated
accessors instead of raw name/value pairs. Invalid values are refused before
they reach the engine, and the engine's own refusals are raised as
structured errors carrying its diagnostic text.

Key Features
------------
- One accessor per engine option, generated from a single option registry
- Closed enumerations per option family (tri-state, encodings, line endings,
  accessibility levels, attribute policies)
- Out-of-range values rejected locally with the legal domain in the message
- Engine diagnostics captured per handle and attached to the raised error
- Changed flag on every setter to tell real changes from no-ops
- Configuration files in TOML, YAML, JSON or ``[tool.tidyopts]`` in pyproject.toml

Requirements
------------
- Python 3.10+
- The HTML Tidy shared library (``libtidy`` 5.x)

Examples
--------
    >>> from tidyopts import AccessibilityLevel, AutoBool, Tidy
    >>> with Tidy() as tidy:
    ...     tidy.indent(AutoBool.AUTO)
    ...     tidy.accessibility_check(AccessibilityLevel.PRIORITY_2)
    True
    True

See Also
--------
tidyopts.registry : the option catalog
tidyopts.setter : validation and dispatch
tidyopts.config : configuration files

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import logging

from tidyopts.config import coerce_value, find_config_in_parents, load_config
from tidyopts.constants import (
    LOGGER_NAME,
    AccessibilityLevel,
    AutoBool,
    CharEncoding,
    Newline,
    RepeatedAttributes,
    SortAttributes,
    TidyChoice,
    UppercaseAttributes,
)
from tidyopts.engine import LibTidyEngine, TidyEngine
from tidyopts.exceptions import (
    ConfigError,
    EngineError,
    EngineRejectedError,
    EngineUnavailableError,
    HandleClosedError,
    MarshalError,
    OptionTypeError,
    OutOfRangeError,
    TidyOptsError,
    UnknownOptionError,
    UnsupportedOptionError,
    ValidationError,
)
from tidyopts.handle import DiagnosticBuffer, EngineHandle
from tidyopts.logging_utils import configure_logging
from tidyopts.registry import IntRange, OptionDescriptor, ValueKind, describe, registry
from tidyopts.setter import OptionSetter
from tidyopts.tidy import ConfigureReport, Tidy

__version__ = "1.0.0"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Facade
    "Tidy",
    "ConfigureReport",
    "OptionSetter",
    "EngineHandle",
    "DiagnosticBuffer",
    # Registry
    "IntRange",
    "OptionDescriptor",
    "ValueKind",
    "describe",
    "registry",
    # Enumerations
    "AccessibilityLevel",
    "AutoBool",
    "CharEncoding",
    "Newline",
    "RepeatedAttributes",
    "SortAttributes",
    "TidyChoice",
    "UppercaseAttributes",
    # Engines
    "LibTidyEngine",
    "TidyEngine",
    # Configuration
    "coerce_value",
    "find_config_in_parents",
    "load_config",
    # Logging
    "configure_logging",
    # Exceptions
    "ConfigError",
    "EngineError",
    "EngineRejectedError",
    "EngineUnavailableError",
    "HandleClosedError",
    "MarshalError",
    "OptionTypeError",
    "OutOfRangeError",
    "TidyOptsError",
    "UnknownOptionError",
    "UnsupportedOptionError",
    "ValidationError",
]
