#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the tidyopts library.

This module defines the exception classes raised while configuring the
markup engine. Validation problems are detected locally and never reach the
engine; engine problems carry whatever diagnostic text the engine produced.

Exception Hierarchy
-------------------
- TidyOptsError (base exception)

  - ValidationError (value rejected before reaching the engine)
    - OutOfRangeError (value outside the option's legal domain)
    - OptionTypeError (wrong option kind or value type)
    - UnknownOptionError (name not in the option registry)

  - EngineError (native engine failures)
    - EngineRejectedError (engine refused a value)
    - UnsupportedOptionError (engine build does not know the option)
    - EngineUnavailableError (shared library missing or too old)
    - HandleClosedError (operation on a released handle)

  - MarshalError (text argument could not be marshalled)

  - ConfigError (configuration file problems)

"""

from typing import Any


class TidyOptsError(Exception):
    """Base exception class for all tidyopts-specific errors.

    Catching this will catch every error raised by the library.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(TidyOptsError):
    """Exception raised when an option value fails local validation.

    Parameters
    ----------
    message : str
        Description of the validation error
    option_name : str, optional
        Engine name of the option being set
    option_value : any, optional
        The value that was rejected
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    option_name : str or None
        The option being set
    option_value : any
        The rejected value

    """

    def __init__(
        self,
        message: str,
        option_name: str | None = None,
        option_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with option details."""
        super().__init__(message, original_error=original_error)
        self.option_name = option_name
        self.option_value = option_value


class OutOfRangeError(ValidationError):
    """Exception raised when a value lies outside an option's legal domain.

    The message always names the valid set or range so callers can correct
    the value.

    Parameters
    ----------
    option_name : str
        Engine name of the option
    option_value : any
        The rejected value
    legal_values : str
        Printable form of the legal domain, e.g. ``{0, 1, 2, 3}`` or ``[0, 4294967295]``
    message : str, optional
        Custom error message. If not provided, generates one from the domain

    """

    def __init__(
        self,
        option_name: str,
        option_value: Any,
        legal_values: str,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the range error."""
        if message is None:
            message = f"Value {option_value!r} for option '{option_name}' is out of range; valid values: {legal_values}"
        super().__init__(message, option_name=option_name, option_value=option_value, original_error=original_error)
        self.legal_values = legal_values


class OptionTypeError(ValidationError):
    """Exception raised when an option or value has the wrong kind.

    Raised for a boolean setter called with a non-boolean, a code from one
    enumeration passed to an option of another, or a typed setter used on an
    option of a different kind.
    """


class UnknownOptionError(ValidationError):
    """Exception raised when an option name is not in the registry.

    Parameters
    ----------
    option_name : str
        The name that could not be resolved
    message : str, optional
        Custom error message

    """

    def __init__(self, option_name: str, message: str | None = None):
        """Initialize the unknown option error."""
        if message is None:
            message = f"Unknown option '{option_name}'"
        super().__init__(message, option_name=option_name)


class EngineError(TidyOptsError):
    """Base exception for failures reported by, or about, the native engine."""


class EngineRejectedError(EngineError):
    """Exception raised when the engine refuses a requested value.

    Parameters
    ----------
    option_name : str
        Engine name of the option
    option_value : any
        The value the engine refused
    diagnostic : str, optional
        The engine's own explanation, copied out of the diagnostic buffer.
        None when the engine did not furnish any text.

    Attributes
    ----------
    diagnostic : str or None
        The engine's diagnostic text, verbatim

    """

    def __init__(self, option_name: str, option_value: Any, diagnostic: str | None = None):
        """Initialize the rejection error with the engine's diagnostic text."""
        message = f"Engine rejected value {option_value!r} for option '{option_name}'"
        if diagnostic:
            message += f": {diagnostic}"
        super().__init__(message)
        self.option_name = option_name
        self.option_value = option_value
        self.diagnostic = diagnostic


class UnsupportedOptionError(EngineError):
    """Exception raised when the loaded engine does not recognise an option name."""

    def __init__(self, option_name: str):
        """Initialize the unsupported option error."""
        super().__init__(f"Option '{option_name}' is not supported by the loaded engine")
        self.option_name = option_name


class EngineUnavailableError(EngineError):
    """Exception raised when the native library cannot be loaded or is too old.

    Parameters
    ----------
    message : str
        Description of the problem
    library_path : str, optional
        The path or name that was tried
    original_error : Exception, optional
        The underlying OSError, if any

    """

    def __init__(self, message: str, library_path: str | None = None, original_error: Exception | None = None):
        """Initialize the error with the library path."""
        super().__init__(message, original_error=original_error)
        self.library_path = library_path


class HandleClosedError(EngineError):
    """Exception raised when an operation is attempted on a released handle."""

    def __init__(self, message: str = "Engine handle has already been closed"):
        """Initialize the closed handle error."""
        super().__init__(message)


class MarshalError(TidyOptsError):
    """Exception raised when a text value cannot be converted for the engine.

    Parameters
    ----------
    option_name : str
        Engine name of the option
    message : str
        Description of the marshalling failure
    original_error : Exception, optional
        The underlying encoding error, if any

    """

    def __init__(self, option_name: str, message: str, original_error: Exception | None = None):
        """Initialize the marshal error."""
        super().__init__(message, original_error=original_error)
        self.option_name = option_name


class ConfigError(TidyOptsError):
    """Exception raised for unreadable or malformed configuration files.

    Parameters
    ----------
    message : str
        Description of the problem
    config_path : str, optional
        Path of the offending file

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the config error with the file path."""
        super().__init__(message, original_error=original_error)
        self.config_path = config_path
