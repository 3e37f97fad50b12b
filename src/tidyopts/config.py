#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery, loading and value coercion for tidyopts.

Option values can be kept in a configuration file instead of code. Supported
files, searched in this order in each directory:

1. ``.tidyopts.toml``
2. ``.tidyopts.yaml`` / ``.tidyopts.yml``
3. ``.tidyopts.json``
4. ``pyproject.toml`` with a ``[tool.tidyopts]`` table

Keys are engine option names (``indent-spaces``) or attribute names
(``indent_spaces``). Values may be typed (``true``, ``4``) or written the way
tidy configuration files spell them (``"yes"``, ``"auto"``, ``"utf8"``).

Example ``.tidyopts.toml``::

    indent = "auto"
    indent-spaces = 2
    char-encoding = "utf8"
    output-xhtml = true
    doctype = "html5"

"""

import json
import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional, Union

import yaml

from tidyopts.constants import AUTO_WORDS, CONFIG_FILENAMES, FALSE_WORDS, PYPROJECT_TOOL_SECTION, TRUE_WORDS, AutoBool
from tidyopts.exceptions import ConfigError, OptionTypeError, OutOfRangeError
from tidyopts.registry import OptionDescriptor, ValueKind

logger = logging.getLogger(__name__)


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.tidyopts]`` table from a pyproject.toml file.

    Returns
    -------
    dict
        The table, or an empty dict if the file has none

    Raises
    ------
    ConfigError
        If the file is not valid TOML or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {e}", config_path=str(pyproject_path), original_error=e) from e
    except OSError as e:
        raise ConfigError(f"Error reading {pyproject_path}: {e}", config_path=str(pyproject_path), original_error=e) from e

    section = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] in {pyproject_path} must be a table, got {type(section).__name__}",
            config_path=str(pyproject_path),
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by walking up from ``start_dir``.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start in, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found, or None

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigError as e:
                logger.debug(f"Skipping unreadable {pyproject_path}: {e}")

        if current.parent == current:
            return None
        current = current.parent


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load option values from a configuration file.

    Parameters
    ----------
    config_path : str or Path
        Path to a TOML, YAML or JSON file, or a pyproject.toml

    Returns
    -------
    dict
        Mapping of option names to raw values

    Raises
    ------
    ConfigError
        If the file is missing, cannot be parsed, or its top level is not a mapping

    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}", config_path=str(path))

    if path.name == "pyproject.toml":
        return _load_pyproject_section(path)

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        elif suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigError(f"Unsupported configuration format '{suffix}' for {path}", config_path=str(path))
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}", config_path=str(path), original_error=e) from e
    except OSError as e:
        raise ConfigError(f"Error reading {path}: {e}", config_path=str(path), original_error=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration in {path} must be a mapping of option names, got {type(data).__name__}",
            config_path=str(path),
        )
    logger.debug(f"Loaded {len(data)} option(s) from {path}")
    return data


def _coerce_bool(descriptor: OptionDescriptor, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    word = str(raw).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise OptionTypeError(
        f"Option '{descriptor.name}' expects yes/no, got {raw!r}", option_name=descriptor.name, option_value=raw
    )


def _coerce_int(descriptor: OptionDescriptor, raw: Any) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError as e:
        raise OptionTypeError(
            f"Option '{descriptor.name}' expects an integer, got {raw!r}",
            option_name=descriptor.name,
            option_value=raw,
            original_error=e,
        ) from e


def coerce_value(descriptor: OptionDescriptor, raw: Any) -> Any:
    """Convert a configuration value into the type the option's setter takes.

    Values that already have the right type pass through untouched, so
    validation is still left to the setter.

    Parameters
    ----------
    descriptor : OptionDescriptor
        The option being configured
    raw : Any
        Value as read from a configuration file

    Returns
    -------
    Any
        bool, AutoBool, an enumeration member, int, or str

    Raises
    ------
    OptionTypeError
        If the value is missing or cannot be read as the option's kind
    OutOfRangeError
        If the text names a choice outside the option's domain

    """
    if raw is None:
        raise OptionTypeError(f"Option '{descriptor.name}' has no value", option_name=descriptor.name, option_value=raw)

    if descriptor.kind is ValueKind.BOOL:
        return _coerce_bool(descriptor, raw)

    if descriptor.kind is ValueKind.AUTO_BOOL:
        if isinstance(raw, (bool, int)):
            return raw
        word = str(raw).strip().lower()
        if word in AUTO_WORDS:
            return AutoBool.AUTO
        return _coerce_bool(descriptor, word)

    if descriptor.kind is ValueKind.ENUM_INT:
        if isinstance(raw, int):
            return raw
        choices = descriptor.legal_values
        try:
            return choices.from_text(str(raw))  # type: ignore[union-attr]
        except ValueError as e:
            raise OutOfRangeError(
                descriptor.name,
                raw,
                ", ".join(member.text for member in choices),  # type: ignore[union-attr]
                original_error=e,
            ) from e

    if descriptor.kind in (ValueKind.FREE_INT, ValueKind.BOUNDED_INT):
        return _coerce_int(descriptor, raw)

    if isinstance(raw, str):
        return raw
    if isinstance(raw, (list, tuple)) and all(isinstance(item, str) for item in raw):
        # Tag lists may be written as arrays
        return ", ".join(raw)
    raise OptionTypeError(
        f"Option '{descriptor.name}' expects text or a list of strings, got {raw!r}",
        option_name=descriptor.name,
        option_value=raw,
    )
