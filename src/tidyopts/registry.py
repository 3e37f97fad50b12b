#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/registry.py
"""Option registry for the engine options exposed by tidyopts.

The registry is the single source of truth for the public option surface:
every accessor on :class:`tidyopts.tidy.Tidy` is generated from the
descriptors defined here, and every setter validates against the
``legal_values`` recorded here.

Examples
--------
Describe an option by engine name or Python attribute name:

    >>> from tidyopts.registry import describe
    >>> describe("accessibility-check").legal_values
    <enum 'AccessibilityLevel'>
    >>> describe("add_xml_decl").kind
    <ValueKind.BOOL: 'bool'>

List the auto-bool options:

    >>> from tidyopts.registry import ValueKind, registry
    >>> [d.name for d in registry.list_options(kind=ValueKind.AUTO_BOOL)]
    ['fix-bad-comments', 'merge-divs', 'show-body-only', 'indent', 'vertical-space', 'output-bom']

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Type, Union

from tidyopts.constants import (
    AccessibilityLevel,
    AutoBool,
    CharEncoding,
    Newline,
    RepeatedAttributes,
    SortAttributes,
    TidyChoice,
    UppercaseAttributes,
)
from tidyopts.exceptions import UnknownOptionError

logger = logging.getLogger(__name__)


class ValueKind(str, Enum):
    """The value domain an option accepts."""

    BOOL = "bool"
    AUTO_BOOL = "autobool"
    BOUNDED_INT = "bounded-int"
    FREE_INT = "int"
    ENUM_INT = "enum"
    STRING = "string"


@dataclass(frozen=True)
class IntRange:
    """Closed integer range ``[minimum, maximum]``."""

    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        """Reject empty ranges."""
        if self.minimum > self.maximum:
            raise ValueError(f"Empty range: minimum {self.minimum} exceeds maximum {self.maximum}")

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.minimum <= value <= self.maximum

    def __str__(self) -> str:
        return f"[{self.minimum}, {self.maximum}]"


LegalValues = Union[Type[TidyChoice], IntRange]


@dataclass(frozen=True)
class OptionDescriptor:
    """Static description of one engine option.

    Parameters
    ----------
    name : str
        The engine's option name, used as its symbolic identifier
    kind : ValueKind
        Value domain of the option
    help : str
        One-line description
    category : str
        Documentation group the option belongs to
    legal_values : type[TidyChoice] or IntRange, optional
        Closed domain for ``ENUM_INT`` and ``BOUNDED_INT`` options

    """

    name: str
    kind: ValueKind
    help: str
    category: str
    legal_values: Optional[LegalValues] = field(default=None)

    def __post_init__(self) -> None:
        """Check that ``legal_values`` is present exactly where the kind needs it."""
        if self.kind is ValueKind.AUTO_BOOL and self.legal_values is None:
            object.__setattr__(self, "legal_values", AutoBool)
        needs_domain = self.kind in (ValueKind.ENUM_INT, ValueKind.BOUNDED_INT, ValueKind.AUTO_BOOL)
        if needs_domain and self.legal_values is None:
            raise ValueError(f"Option '{self.name}' of kind {self.kind.value} requires legal_values")
        if not needs_domain and self.legal_values is not None:
            raise ValueError(f"Option '{self.name}' of kind {self.kind.value} does not take legal_values")
        if self.kind is ValueKind.ENUM_INT and not isinstance(self.legal_values, type):
            raise ValueError(f"Option '{self.name}' needs an enumeration as legal_values")
        if self.kind is ValueKind.BOUNDED_INT and not isinstance(self.legal_values, IntRange):
            raise ValueError(f"Option '{self.name}' needs an IntRange as legal_values")

    @property
    def attribute(self) -> str:
        """Python attribute name of the generated accessor."""
        return self.name.replace("-", "_")

    @property
    def domain(self) -> Optional[str]:
        """Printable legal domain, or None for unconstrained kinds."""
        if self.legal_values is None:
            return None
        if isinstance(self.legal_values, IntRange):
            return str(self.legal_values)
        return self.legal_values.domain()

    def accepts(self, value: int) -> bool:
        """Return True if ``value`` is a member of ``legal_values``."""
        if self.legal_values is None:
            return True
        if isinstance(self.legal_values, IntRange):
            return value in self.legal_values
        return value in {int(member) for member in self.legal_values}


def _opt(name: str, kind: ValueKind, category: str, help: str, legal_values: Optional[LegalValues] = None):
    return OptionDescriptor(name=name, kind=kind, help=help, category=category, legal_values=legal_values)


B = ValueKind.BOOL
A = ValueKind.AUTO_BOOL
E = ValueKind.ENUM_INT
I = ValueKind.FREE_INT  # noqa: E741
S = ValueKind.STRING

# The engine's own documentation order is kept within each category.
OPTION_CATALOG: tuple[OptionDescriptor, ...] = (
    # HTML, XHTML, XML
    _opt("add-xml-decl", B, "markup", "Add the XML declaration when outputting XML or XHTML"),
    _opt("add-xml-space", B, "markup", 'Add xml:space="preserve" to elements such as <pre>, <style> and <script>'),
    _opt("alt-text", S, "markup", "Default alt= text for <img> elements missing one"),
    _opt("assume-xml-procins", B, "markup", "Require ?> as the terminator of processing instructions"),
    _opt("bare", B, "markup", "Strip Microsoft specific HTML from Word 2000 documents"),
    _opt("clean", B, "markup", "Replace presentational tags and attributes by style rules"),
    _opt("css-prefix", S, "markup", "Prefix used for generated style rules"),
    _opt("decorate-inferred-ul", B, "markup", "Decorate inferred <ul> elements with CSS to avoid indentation"),
    _opt("doctype", S, "markup", "DOCTYPE to emit: omit, auto, strict, loose, html5 or a formal public identifier"),
    _opt("drop-empty-paras", B, "markup", "Discard empty paragraphs"),
    _opt("drop-proprietary-attributes", B, "markup", "Strip proprietary attributes such as MS data binding"),
    _opt("enclose-block-text", B, "markup", "Wrap text in mixed-content block elements in a <p>"),
    _opt("enclose-text", B, "markup", "Wrap text directly inside <body> in a <p>"),
    _opt("escape-cdata", B, "markup", "Convert <![CDATA[]]> sections to normal text"),
    _opt("fix-backslash", B, "markup", "Replace backslashes in URLs by forward slashes"),
    _opt("fix-bad-comments", A, "markup", "Replace unexpected hyphens in comments; auto fixes them in HTML only"),
    _opt("fix-uri", B, "markup", "Escape illegal characters in URI attribute values"),
    _opt("hide-comments", B, "markup", "Omit comments from the output"),
    _opt("indent-cdata", B, "markup", "Indent <![CDATA[]]> sections"),
    _opt("input-xml", B, "markup", "Use the XML parser instead of the error correcting HTML parser"),
    _opt("join-classes", B, "markup", "Combine multiple class attributes into one"),
    _opt("join-styles", B, "markup", "Combine multiple style attributes into one"),
    _opt("literal-attributes", B, "markup", "Pass whitespace in attribute values through unchanged"),
    _opt("logical-emphasis", B, "markup", "Replace <i> by <em> and <b> by <strong>"),
    _opt("lower-literals", B, "markup", "Lower-case attribute values drawn from predefined lists"),
    _opt("merge-divs", A, "markup", "Merge nested <div> elements when cleaning"),
    _opt("ncr", B, "markup", "Allow numeric character references"),
    _opt("new-blocklevel-tags", S, "markup", "Space or comma separated list of new block-level tags"),
    _opt("new-empty-tags", S, "markup", "Space or comma separated list of new empty inline tags"),
    _opt("new-inline-tags", S, "markup", "Space or comma separated list of new non-empty inline tags"),
    _opt("new-pre-tags", S, "markup", "Space or comma separated list of new tags handled like <pre>"),
    _opt("numeric-entities", B, "markup", "Output non built-in entities in numeric form"),
    _opt("output-html", B, "markup", "Write pretty printed output as HTML"),
    _opt("output-xhtml", B, "markup", "Write pretty printed output as XHTML"),
    _opt("output-xml", B, "markup", "Write pretty printed output as well-formed XML"),
    _opt("quote-ampersand", B, "markup", "Output unadorned & characters as &amp;"),
    _opt("quote-marks", B, "markup", 'Output " characters as &quot;'),
    _opt("quote-nbsp", B, "markup", "Output non-breaking spaces as entities"),
    _opt("repeated-attributes", E, "markup", "Keep the first or last of repeated attributes", RepeatedAttributes),
    _opt("replace-color", B, "markup", "Replace numeric colour values by colour names"),
    _opt("show-body-only", A, "markup", "Print only the contents of the body element"),
    _opt("sort-attributes", E, "markup", "Sort attributes on output", SortAttributes),
    _opt("uppercase-attributes", E, "markup", "Output attribute names in upper case, or keep them", UppercaseAttributes),
    _opt("uppercase-tags", B, "markup", "Output tag names in upper case"),
    _opt("word-2000", B, "markup", "Strip the surplus markup Word 2000 inserts into Web pages"),
    # Diagnostics
    _opt("accessibility-check", E, "diagnostics", "Accessibility checking priority level", AccessibilityLevel),
    _opt("show-errors", I, "diagnostics", "Number of errors to show before giving up; 0 shows none"),
    _opt("show-warnings", B, "diagnostics", "Report warnings"),
    # Pretty print
    _opt("break-before-br", B, "pretty-print", "Output a line break before each <br>"),
    _opt("indent", A, "pretty-print", "Indent block-level content"),
    _opt("indent-attributes", B, "pretty-print", "Begin each attribute on a new line"),
    _opt("indent-spaces", I, "pretty-print", "Number of spaces per indentation level"),
    _opt("markup", B, "pretty-print", "Generate a pretty printed version of the markup"),
    _opt("punctuation-wrap", B, "pretty-print", "Allow line wrapping after Unicode or Chinese punctuation"),
    _opt("tab-size", I, "pretty-print", "Columns between tab stops when reading input"),
    _opt("vertical-space", A, "pretty-print", "Add empty lines for readability"),
    _opt("wrap", I, "pretty-print", "Right margin for line wrapping; 0 disables wrapping"),
    _opt("wrap-asp", B, "pretty-print", "Wrap text inside ASP pseudo elements"),
    _opt("wrap-attributes", B, "pretty-print", "Wrap attribute values"),
    _opt("wrap-jste", B, "pretty-print", "Wrap text inside JSTE pseudo elements"),
    _opt("wrap-php", B, "pretty-print", "Wrap text inside PHP pseudo elements"),
    _opt("wrap-script-literals", B, "pretty-print", "Wrap string literals in script attributes"),
    _opt("wrap-sections", B, "pretty-print", "Wrap text inside <![ ... ]> section tags"),
    # Character encoding
    _opt("ascii-chars", B, "encoding", "Downgrade named entities to ASCII equivalents when cleaning"),
    _opt("char-encoding", E, "encoding", "Encoding used for both input and output", CharEncoding),
    _opt("input-encoding", E, "encoding", "Encoding used for the input", CharEncoding),
    _opt("newline", E, "encoding", "Line ending used on output", Newline),
    _opt("output-bom", A, "encoding", "Write a Unicode byte order mark"),
    _opt("output-encoding", E, "encoding", "Encoding used for the output", CharEncoding),
    # Miscellaneous
    _opt("error-file", S, "misc", "File errors and warnings are written to"),
    _opt("force-output", B, "misc", "Produce output even if errors are encountered"),
    _opt("gnu-emacs", B, "misc", "Report errors in a format GNU Emacs can parse"),
    _opt("gnu-emacs-file", S, "misc", "File name reported in GNU Emacs format messages"),
    _opt("keep-time", B, "misc", "Keep the original modification time of files modified in place"),
    _opt("output-file", S, "misc", "File markup is written to"),
    _opt("quiet", B, "misc", "Suppress the summary and informational messages"),
    _opt("tidy-mark", B, "misc", "Add a meta element marking the document as tidied"),
    _opt("write-back", B, "misc", "Write the tidied markup back to the file it was read from"),
)

del B, A, E, I, S


class OptionRegistry:
    """Read-only lookup over a fixed catalog of option descriptors.

    Options can be looked up by engine name (``"add-xml-decl"``), by Python
    attribute name (``"add_xml_decl"``), or by passing a descriptor through.
    """

    def __init__(self, descriptors: tuple[OptionDescriptor, ...]):
        """Index the catalog by engine name.

        Raises
        ------
        ValueError
            If two descriptors share a name.

        """
        self._by_name: dict[str, OptionDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._by_name:
                raise ValueError(f"Duplicate option descriptor '{descriptor.name}'")
            self._by_name[descriptor.name] = descriptor
        logger.debug(f"Option registry built with {len(self._by_name)} options")

    def describe(self, option: Union[str, OptionDescriptor]) -> OptionDescriptor:
        """Return the descriptor for ``option``.

        Parameters
        ----------
        option : str or OptionDescriptor
            Engine name, attribute name, or a descriptor

        Returns
        -------
        OptionDescriptor
            The registered descriptor

        Raises
        ------
        UnknownOptionError
            If the name is not in the catalog

        """
        if isinstance(option, OptionDescriptor):
            return option
        if not isinstance(option, str):
            raise UnknownOptionError(
                repr(option), message=f"Option names must be strings, got {type(option).__name__} {option!r}"
            )
        descriptor = self._by_name.get(option.strip().lower().replace("_", "-"))
        if descriptor is None:
            raise UnknownOptionError(option)
        return descriptor

    def list_options(
        self, kind: Optional[ValueKind] = None, category: Optional[str] = None
    ) -> list[OptionDescriptor]:
        """List descriptors, optionally filtered by kind and category."""
        return [
            descriptor
            for descriptor in self._by_name.values()
            if (kind is None or descriptor.kind is kind) and (category is None or descriptor.category == category)
        ]

    def __contains__(self, option: object) -> bool:
        if isinstance(option, OptionDescriptor):
            return self._by_name.get(option.name) == option
        if not isinstance(option, str):
            return False
        return option.strip().lower().replace("_", "-") in self._by_name

    def __iter__(self) -> Iterator[OptionDescriptor]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


registry = OptionRegistry(OPTION_CATALOG)


def describe(option: Union[str, OptionDescriptor]) -> OptionDescriptor:
    """Describe ``option`` using the global registry."""
    return registry.describe(option)


__all__ = [
    "IntRange",
    "OPTION_CATALOG",
    "OptionDescriptor",
    "OptionRegistry",
    "ValueKind",
    "describe",
    "registry",
]
