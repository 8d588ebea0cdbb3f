"""
mmCIF data reader using the gemmi backend.

This module provides CifDataParser, which reads mmCIF data files or strings
with gemmi and converts each data block into DataBlock/Table objects that the
PDBML writer consumes.
"""

from pathlib import Path
from typing import List, Optional, Union

import gemmi

from .defaults import DataValue
from .models import DataBlock, Table


def unquote(value: str) -> str:
    """Remove CIF quoting from a raw value, keeping the null markers as is."""
    if value in (DataValue.UNKNOWN.value, DataValue.INAPPLICABLE.value):
        return value
    return gemmi.cif.as_string(value)


class CifDataParser:
    """
    mmCIF reader built on gemmi.

    Values are unquoted; the unknown (``?``) and inapplicable (``.``)
    markers are kept verbatim so the writer can tell them apart.
    """

    def __init__(self, categories: Optional[List[str]] = None):
        """
        :param categories: Optional list of categories to read
        """
        self.categories = categories

    def parse_file(self, file_path: Union[str, Path]) -> List[DataBlock]:
        """
        Parse an mmCIF file.

        :param file_path: Path to the mmCIF file
        :return: The data blocks of the file
        """
        doc = gemmi.cif.read_file(str(file_path))
        return [self._convert_block(block) for block in doc]

    def parse_string(self, text: str) -> List[DataBlock]:
        doc = gemmi.cif.read_string(text)
        return [self._convert_block(block) for block in doc]

    def _convert_block(self, gemmi_block) -> DataBlock:
        """Convert a gemmi block into a DataBlock of tables."""
        data_block = DataBlock(gemmi_block.name)
        pairs = {}

        for item in gemmi_block:
            if item.pair:
                tag, value = item.pair
                category_name = self._extract_category_name(tag)
                if self.categories and category_name not in self.categories:
                    continue
                pairs.setdefault(category_name, []).append(
                    (self._extract_field_name(tag), unquote(value))
                )

            elif item.loop:
                loop = item.loop
                tags = loop.tags
                if not tags:
                    continue

                category_name = self._extract_category_name(tags[0])
                if self.categories and category_name not in self.categories:
                    continue

                table = Table(category_name, [self._extract_field_name(tag) for tag in tags])
                for row_idx in range(loop.length()):
                    table.add_row([unquote(loop[row_idx, col]) for col in range(len(tags))])
                data_block.add_table(table)

        for category_name, fields in pairs.items():
            columns = [field for field, _ in fields]
            data_block.add_table(Table(category_name, columns, [[value for _, value in fields]]))

        return data_block

    @staticmethod
    def _extract_category_name(tag: str) -> str:
        """Extract the category name from a tag (e.g., '_atom_site.id' -> 'atom_site')"""
        return tag.lstrip("_").split(".", 1)[0]

    @staticmethod
    def _extract_field_name(tag: str) -> str:
        """Extract the field name from a tag (e.g., '_atom_site.id' -> 'id')"""
        if "." in tag:
            return tag.split(".", 1)[1]
        return tag
