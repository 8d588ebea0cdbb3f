"""
PDBML instance writer.

PdbMlWriter serializes mmCIF tables as PDBML: one ``<ns:catCategory>``
element per table, one ``<ns:cat>`` element per row with the key items as
attributes and the other items as child elements.
"""

from typing import IO, Dict, List, Optional

from .common import DictionaryMetadata, InvalidTypeCodeError, ValueFormatError
from .defaults import DataValue, TypeCode, TypeSuffix, XMLConstant
from .formatting import escape_string, format_value, make_item_name, qualify_name
from .models import Table
from .writer import XmlWriter


ATOM_SITE_CATEGORY = "atom_site"
ATOM_RECORD_CATEGORY = "category_atom_record"
ATOM_RECORD = "atom_record"

# Column order and field widths of the fixed-width atom record layout
ATOM_RECORD_COLUMNS = [
    ("group_PDB", 6),
    ("pdbx_PDB_model_num", 4),
    ("label_asym_id", 3),
    ("auth_asym_id", 4),
    ("label_seq_id", 6),
    ("auth_seq_id", 6),
    ("pdbx_PDB_ins_code", 2),
    ("label_alt_id", 2),
    ("label_comp_id", 4),
    ("auth_comp_id", 4),
    ("type_symbol", 3),
    ("label_atom_id", 6),
    ("auth_atom_id", 6),
    ("Cartn_x", 9),
    ("Cartn_y", 9),
    ("Cartn_z", 9),
    ("occupancy", 7),
    ("B_iso_or_equiv", 7),
    ("label_entity_id", 5),
    ("pdbx_formal_charge", 4),
]
ATOM_NAME_COLUMNS = {"label_atom_id", "auth_atom_id"}


def make_category_element_name(category: str) -> str:
    """Name of the element wrapping all rows of a category."""
    return f"{category}{TypeSuffix.CATEGORY.value}"


class PdbMlWriter(XmlWriter):
    """A class to write mmCIF tables as PDBML instance XML."""

    def __init__(self, stream: IO, dictionary: DictionaryMetadata,
                 ns: str = XMLConstant.PDBX_PREFIX.value, quiet: bool = False,
                 log: Optional[IO] = None):
        """
        :param stream: Text stream the XML is written to
        :param dictionary: Dictionary metadata used for keys, types and nulls
        :param ns: Namespace prefix of the PDBML elements
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics
        """
        super().__init__(stream, ns, quiet, log)
        self.dictionary = dictionary

    # Datablock and category wrappers

    def write_datablock_opening_tag(self, namespace_uri: str, block_name: Optional[str] = None,
                                    schema_location: Optional[str] = None) -> None:
        """Write the opening datablock tag with its namespace declarations."""
        self.write_qualified_opening_tag(XMLConstant.DATABLOCK.value)
        if block_name is not None:
            self.write_datablock_attribute(block_name)
        self.write_namespace(namespace_uri)
        self.write_xsi_namespace()
        if schema_location:
            self.write_schema_location_attribute(f"{namespace_uri} {schema_location}")
        self.write_closing_bracket()
        self.increment_indent()

    def write_datablock_attribute(self, value: str) -> None:
        self.write_attribute(XMLConstant.DATABLOCK_NAME.value, value)

    def write_datablock_closing_tag(self) -> None:
        self.decrement_indent()
        self.write_qualified_closing_tag(XMLConstant.DATABLOCK.value)

    def write_category_opening_tag(self, category: str) -> None:
        self.write_qualified_opening_tag(make_category_element_name(category), close_bracket=True)

    def write_category_closing_tag(self, category: str) -> None:
        self.write_qualified_closing_tag(make_category_element_name(category))

    # Tables

    def _format(self, table: Table, column: str, value: str, type_code: TypeCode,
                width: Optional[int]) -> str:
        try:
            return format_value(value, type_code, width)
        except (ValueFormatError, InvalidTypeCodeError):
            self._warn(f'Warning - In category "{table.name}" and attribute "{column}", '
                       f'value "{value}" could not be formatted.')
            return escape_string(value)

    def _is_row_valid(self, table: Table, row: List[str], columns: List[str],
                      key_columns: Dict[str, bool], null_allowed: Dict[str, bool]) -> bool:
        for column in columns:
            value = row[table.column_index(column)]
            if key_columns[column]:
                if DataValue.is_null(value):
                    return False
            elif not null_allowed[column]:
                if value in (DataValue.UNKNOWN.value, DataValue.EMPTY_STRING.value):
                    return False
        return True

    @staticmethod
    def _width(column: str, value: str, widths: Optional[Dict[str, int]],
               recalc_widths: bool) -> Optional[int]:
        if widths is None:
            return None
        if recalc_widths and len(value) > widths.get(column, 0):
            widths[column] = len(value)
        return widths.get(column) if widths else None

    def write_table(self, table: Table, widths: Optional[Dict[str, int]] = None,
                    recalc_widths: bool = False) -> bool:
        """
        Write one table as a PDBML category element.

        Columns of undefined items are dropped. Tables without defined or
        without key columns are skipped, and so are rows whose values break
        the null rules of their items.

        :param table: The table to write
        :param widths: Optional per-column widths; string values are truncated
            to them
        :param recalc_widths: Track the maximum observed width per column in
            ``widths``
        :return: True if at least one row was written
        """
        columns = []
        for column in table.columns:
            item = make_item_name(table.name, column)
            if self.dictionary.is_item_defined(item):
                columns.append(column)
            else:
                self._warn(f'Skipping conversion to XML of non-defined item "{item}"')

        if not columns:
            self._warn(f'Warning: Skipping conversion to XML of table "{table.name}", '
                       f'since no items are specified.')
            return False

        columns.sort()
        items = {column: make_item_name(table.name, column) for column in columns}
        key_columns = {column: self.dictionary.is_key_item(items[column]) for column in columns}

        if not any(key_columns.values()):
            self._warn(f'Warning: Skipping conversion to XML of table "{table.name}", '
                       f'since no keys values are specified.')
            return False

        null_allowed = {column: self.dictionary.is_unknown_value_allowed(items[column])
                        for column in columns}
        type_codes = {column: self.dictionary.get_type_code(items[column]) for column in columns}
        is_all_key = all(key_columns.values())

        category_open = False
        for row_number, row in enumerate(table.rows, 1):
            if not self._is_row_valid(table, row, columns, key_columns, null_allowed):
                self._warn(f'Warning: Skipping conversion to XML of row # {row_number} '
                           f'in table "{table.name}".')
                continue

            if not category_open:
                category_open = True
                self.write_category_opening_tag(table.name)
                self.increment_indent()

            self._write_row(table, row, columns, items, key_columns, type_codes,
                            is_all_key, widths, recalc_widths)

        if category_open:
            self.decrement_indent()
            self.write_category_closing_tag(table.name)
        else:
            self._warn(f'Warning: Skipping conversion to XML of table "{table.name}".')
        return category_open

    def _write_row(self, table: Table, row: List[str], columns: List[str], items: Dict[str, str],
                   key_columns: Dict[str, bool], type_codes: Dict[str, TypeCode],
                   is_all_key: bool, widths: Optional[Dict[str, int]], recalc_widths: bool) -> None:
        self.indent()
        self.write_data(f"<{qualify_name(table.name, self.ns)}")

        for column in columns:
            if not key_columns[column]:
                continue
            value = self.dictionary.standardize_enum_value(items[column], row[table.column_index(column)])
            width = self._width(column, value, widths, recalc_widths)
            formatted = self._format(table, column, value, type_codes[column], width)
            self.write_raw_attribute(qualify_name(column), formatted)

        self.write_closing_bracket(no_new_line=True)
        if not is_all_key:
            self.write_new_line()

        self.increment_indent()
        for column in columns:
            if key_columns[column]:
                continue
            value = row[table.column_index(column)]
            if value in (DataValue.UNKNOWN.value, DataValue.EMPTY_STRING.value):
                continue

            self.indent()
            self.write_data(f"<{qualify_name(column, self.ns)}")
            if value == DataValue.INAPPLICABLE.value:
                self.write_nil_attribute()
                self.write_empty_tag_end()
                continue

            self.write_closing_bracket(no_new_line=True)
            value = self.dictionary.standardize_enum_value(items[column], value)
            width = self._width(column, value, widths, recalc_widths)
            self.write_data(self._format(table, column, value, type_codes[column], width))
            self.write_qualified_closing_tag(column, indent=False)
        self.decrement_indent()

        self.write_qualified_closing_tag(table.name, indent=not is_all_key)

    def write_alternate_atom_site_table(self, table: Table) -> None:
        """
        Write an atom_site table in the compact fixed-width atom record layout.

        Every row becomes one ``atom_record`` element holding the values of
        the known atom_site columns, padded to fixed widths.
        """
        columns = [(column, width) for column, width in ATOM_RECORD_COLUMNS if table.has_column(column)]

        self.write_qualified_opening_tag(ATOM_RECORD_CATEGORY, close_bracket=True)
        self.increment_indent()

        for row_index in range(len(table)):
            record_id = table.get_value(row_index, "id") if table.has_column("id") else ""
            self.indent()
            self.write_data("<" + qualify_name(ATOM_RECORD, self.ns))
            self.write_data(" id=" + f'"{escape_string(record_id)}"'.rjust(9))
            self.write_closing_bracket(no_new_line=True)

            for column, width in columns:
                value = table.get_value(row_index, column)
                if not value:
                    self.write_data(DataValue.UNKNOWN.value)
                    continue
                if column in ATOM_NAME_COLUMNS:
                    self.write_data(" " + escape_string(value).replace(" ", "&#32;"))
                else:
                    self.write_data(escape_string(value).rjust(width))
                self.write_data(" ")

            self.write_qualified_closing_tag(ATOM_RECORD, indent=False)

        self.decrement_indent()
        self.write_qualified_closing_tag(ATOM_RECORD_CATEGORY)
