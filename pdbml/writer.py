"""
XML tag emission primitives.

XmlWriter writes well-formed XML text to any text stream with a per-writer
indentation level. It knows nothing about PDBML or XSD vocabulary; the
schema and instance writers build on it.
"""

import sys
from typing import IO, Optional

from .defaults import XMLConstant
from .formatting import escape_string, escape_text, qualify_name


class XmlWriter:
    """A class to write XML tags, attributes and content to a text stream."""

    INDENT_SPACES = 3

    def __init__(self, stream: IO, ns: str = "", quiet: bool = False, log: Optional[IO] = None):
        """
        Initialize the writer.

        :param stream: Text stream the XML is written to
        :param ns: Namespace prefix used by the qualified writers
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics, ``sys.stderr`` by default
        """
        self.stream = stream
        self.ns = ns
        self.quiet = quiet
        self.log = log
        self.indent_level = 0

    def _warn(self, message: str) -> None:
        if not self.quiet:
            print(message, file=self.log or sys.stderr)

    # Indentation

    def increment_indent(self, levels: int = 1) -> None:
        self.indent_level += levels

    def decrement_indent(self, levels: int = 1) -> None:
        self.indent_level = max(0, self.indent_level - levels)

    def indent(self) -> None:
        self.stream.write(" " * (self.INDENT_SPACES * self.indent_level))

    def write_new_line(self) -> None:
        self.stream.write("\n")

    # Document level

    def write_declaration(self) -> None:
        self.stream.write(
            f'<?xml version="{XMLConstant.XML_VERSION.value}" '
            f'encoding="{XMLConstant.ENCODING.value}"?>\n'
        )

    def write_comment(self, comment: str) -> None:
        self.indent()
        self.stream.write(f"<!-- {comment} -->\n")

    # Tags

    def write_opening_tag(self, tag: str, close_bracket: bool = False) -> None:
        """Write ``<tag`` at the current indentation, optionally closing it."""
        self.indent()
        self.stream.write(f"<{tag}")
        if close_bracket:
            self.write_closing_bracket()

    def write_qualified_opening_tag(self, tag: str, close_bracket: bool = False) -> None:
        self.write_opening_tag(qualify_name(tag, self.ns), close_bracket)

    def write_closing_bracket(self, no_new_line: bool = False) -> None:
        self.stream.write(">" if no_new_line else ">\n")

    def write_empty_tag_end(self) -> None:
        """Close an open tag as an empty element."""
        self.stream.write(" />\n")

    def write_closing_tag(self, tag: str, indent: bool = True) -> None:
        if indent:
            self.indent()
        self.stream.write(f"</{tag}>\n")

    def write_qualified_closing_tag(self, tag: str, indent: bool = True) -> None:
        self.write_closing_tag(qualify_name(tag, self.ns), indent)

    # Attributes

    def write_attribute(self, name: str, value: str, width: Optional[int] = None) -> None:
        """Write `` name="value"`` with the value escaped."""
        self.stream.write(f' {name}="{escape_string(value, width)}"')

    def write_raw_attribute(self, name: str, value: str) -> None:
        """Write an attribute whose value is already escaped."""
        self.stream.write(f' {name}="{value}"')

    def write_namespace_attribute(self, ns: str, uri: str) -> None:
        self.write_raw_attribute(f"xmlns:{ns}", escape_string(uri))

    def write_namespace(self, uri: str) -> None:
        self.write_namespace_attribute(self.ns, uri)

    def write_xsi_namespace(self) -> None:
        self.write_namespace_attribute(XMLConstant.XSI_PREFIX.value, XMLConstant.XSI_URI.value)

    def write_schema_location_attribute(self, value: str) -> None:
        self.write_attribute(f"{XMLConstant.XSI_PREFIX.value}:schemaLocation", value)

    def write_nil_attribute(self, value: str = "true") -> None:
        self.write_raw_attribute(f"{XMLConstant.XSI_PREFIX.value}:nil", value)

    def write_lang_attribute(self, lang: str = "en") -> None:
        self.write_raw_attribute("xml:lang", lang)

    # Content

    def write_data(self, formatted: str) -> None:
        """Write already formatted content."""
        self.stream.write(formatted)

    def write_text(self, text: str) -> None:
        """Write multi-line text content, escaped with newlines kept."""
        self.stream.write(escape_text(text))
