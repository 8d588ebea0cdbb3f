"""
Documentation helpers for the generated schema.

Descriptions in a DDL2 dictionary refer to items by their CIF names; in the
schema documentation those references read as "attribute x in category y".
Category examples are CIF fragments which CifExampleRenderer re-renders as
PDBML so the documentation shows the XML form.
"""

import io
import re
import sys
from typing import IO, Optional

from .common import DictionaryMetadata, ExampleRenderError, ExampleRenderer
from .defaults import XMLConstant
from .parser import CifDataParser
from .pdbml_writer import PdbMlWriter


_CIF_ITEM_WORD_RE = re.compile(r"^_([^.\s]+)\.(\S+?)([.;,]?)$")
EXAMPLE_BLOCK_HEADER = "data_example\n"


def format_cif_example(text: str) -> str:
    """Strip the leading whitespace of every line of a CIF example."""
    if not text:
        return ""
    lines = (line.lstrip() for line in text.splitlines(keepends=True))
    return "\n" + "".join(lines) + "\n\n"


def format_cif_description(text: str) -> str:
    """
    Rewrite CIF item references of a description in prose.

    A line holding exactly one ``_category.attribute`` word has it replaced
    by ``attribute attribute in category category``, keeping a trailing
    ``.``, ``;`` or ``,``. Leading whitespace of every line is removed.
    """
    if not text:
        return ""

    lines = []
    for line in text.splitlines():
        stripped = line.lstrip()
        if not stripped:
            lines.append("")
            continue

        words = []
        references = 0
        for word in stripped.split():
            match = _CIF_ITEM_WORD_RE.match(word)
            if match:
                references += 1
                category, attribute, punctuation = match.groups()
                words.append(f"attribute {attribute} in category {category}{punctuation}")
            else:
                words.append(word)

        lines.append(" ".join(words) if references == 1 else stripped)
    return "\n".join(lines)


class CifExampleRenderer(ExampleRenderer):
    """Renders CIF example fragments as PDBML with PdbMlWriter."""

    def __init__(self, dictionary: DictionaryMetadata, ns: str = XMLConstant.PDBX_PREFIX.value,
                 quiet: bool = False, log: Optional[IO] = None):
        """
        :param dictionary: Dictionary metadata used by the writer
        :param ns: Namespace prefix of the PDBML elements
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics
        """
        self.dictionary = dictionary
        self.ns = ns
        self.quiet = quiet
        self.log = log
        self.parser = CifDataParser()

    def render(self, text: str) -> str:
        try:
            return self._render(text)
        except ExampleRenderError:
            raise
        except Exception as e:
            raise ExampleRenderError(f"Cannot render CIF example: {e}") from e

    def _render(self, text: str) -> str:
        try:
            blocks = self.parser.parse_string(EXAMPLE_BLOCK_HEADER + format_cif_example(text))
        except (RuntimeError, ValueError) as e:
            raise ExampleRenderError(f"Cannot parse CIF example: {e}") from e

        stream = io.StringIO()
        writer = PdbMlWriter(stream, self.dictionary, self.ns, quiet=self.quiet, log=self.log)
        categories = set(self.dictionary.get_category_names())
        for block in blocks:
            for table in block:
                if table.name not in categories:
                    if not self.quiet:
                        print(f' Skipping conversion to XML of the unknown table "{table.name}"',
                              file=self.log or sys.stderr)
                    continue
                if len(table):
                    writer.write_table(table)
        return stream.getvalue()
