#!/usr/bin/env python3
"""
Test suite for writing mmCIF tables as PDBML instance XML.

Covers key attributes, null handling, enumeration standardisation, value
formatting, skipped rows and tables, and the fixed-width atom record layout.
"""

import io
import unittest
import xml.etree.ElementTree as ET

from pdbml import PdbMlWriter, Table, make_category_element_name
from tests.test_utils import NAMESPACE_URI, NAMESPACES, build_dictionary


class TestPdbMlWriter(unittest.TestCase):
    """Test table serialization."""

    def setUp(self):
        self.dictionary = build_dictionary()
        self.stream = io.StringIO()
        self.log = io.StringIO()
        self.writer = PdbMlWriter(self.stream, self.dictionary, log=self.log)

    def _write_document(self, *tables):
        self.writer.write_declaration()
        self.writer.write_datablock_opening_tag(NAMESPACE_URI, "TEST")
        for table in tables:
            self.writer.write_table(table)
        self.writer.write_datablock_closing_tag()
        return ET.fromstring(self.stream.getvalue().encode("utf-8"))

    def test_category_element_name(self):
        self.assertEqual(make_category_element_name("atom_site"), "atom_siteCategory")

    def test_datablock_tag(self):
        root = self._write_document()
        self.assertEqual(root.tag, f"{{{NAMESPACE_URI}}}datablock")
        self.assertEqual(root.get("datablockName"), "TEST")

    def test_key_items_become_attributes(self):
        root = self._write_document(Table("cell", ["length_a", "entry_id", "Z_PDB"],
                                          [["10.5", "1ABC", "4"]]))
        cell = root.find("PDBx:cellCategory/PDBx:cell", NAMESPACES)
        self.assertIsNotNone(cell)
        self.assertEqual(cell.get("entry_id"), "1ABC")
        self.assertEqual(cell.find("PDBx:length_a", NAMESPACES).text, "10.5")
        self.assertEqual(cell.find("PDBx:Z_PDB", NAMESPACES).text, "4")

    def test_child_elements_sorted(self):
        self._write_document(Table("cell", ["length_a", "entry_id", "Z_PDB"],
                                   [["10.5", "1ABC", "4"]]))
        output = self.stream.getvalue()
        self.assertLess(output.index("<PDBx:Z_PDB>"), output.index("<PDBx:length_a>"))

    def test_all_key_row_on_one_line(self):
        self._write_document(Table("entry", ["id"], [["1ABC"]]))
        self.assertIn('<PDBx:entry id="1ABC"></PDBx:entry>\n', self.stream.getvalue())

    def test_unknown_values_are_omitted(self):
        root = self._write_document(Table("struct_asym", ["id", "entity_id", "details"],
                                          [["A", "1", "?"]]))
        asym = root.find("PDBx:struct_asymCategory/PDBx:struct_asym", NAMESPACES)
        self.assertIsNone(asym.find("PDBx:details", NAMESPACES))

    def test_inapplicable_values_are_nil(self):
        self._write_document(Table("struct_asym", ["id", "entity_id", "details"],
                                   [["A", "1", "."]]))
        self.assertIn('<PDBx:details xsi:nil="true" />', self.stream.getvalue())

    def test_enumeration_case_is_standardized(self):
        root = self._write_document(Table("entity", ["id", "type"], [["1", "NON-POLYMER"]]))
        entity_type = root.find("PDBx:entityCategory/PDBx:entity/PDBx:type", NAMESPACES)
        self.assertEqual(entity_type.text, "non-polymer")

    def test_scientific_float_is_rewritten(self):
        root = self._write_document(Table("atom_site", ["id", "B_iso_or_equiv"],
                                          [["1", "1.5E+01"]]))
        value = root.find("PDBx:atom_siteCategory/PDBx:atom_site/PDBx:B_iso_or_equiv",
                          NAMESPACES)
        self.assertEqual(value.text, "15")

    def test_unformattable_value_is_written_escaped(self):
        root = self._write_document(Table("cell", ["entry_id", "length_a", "Z_PDB"],
                                          [["1ABC", "10.5", "4<"]]))
        self.assertIn('could not be formatted', self.log.getvalue())
        value = root.find("PDBx:cellCategory/PDBx:cell/PDBx:Z_PDB", NAMESPACES)
        self.assertEqual(value.text, "4<")

    def test_text_values_keep_line_breaks(self):
        root = self._write_document(Table("entity", ["id", "pdbx_description"],
                                          [["1", "first line\nsecond line"]]))
        value = root.find("PDBx:entityCategory/PDBx:entity/PDBx:pdbx_description", NAMESPACES)
        self.assertEqual(value.text, "first line\nsecond line")

    def test_undefined_columns_are_dropped(self):
        root = self._write_document(Table("cell", ["entry_id", "length_a", "volume"],
                                          [["1ABC", "10.5", "1000.0"]]))
        cell = root.find("PDBx:cellCategory/PDBx:cell", NAMESPACES)
        self.assertIsNone(cell.find("PDBx:volume", NAMESPACES))
        self.assertIn('non-defined item "_cell.volume"', self.log.getvalue())

    def test_table_without_defined_items_is_skipped(self):
        table = Table("refine", ["ls_d_res_high"], [["1.5"]])
        self.assertFalse(self.writer.write_table(table))
        self.assertIn("since no items are specified", self.log.getvalue())
        self.assertEqual(self.stream.getvalue(), "")

    def test_table_without_key_columns_is_skipped(self):
        table = Table("cell", ["length_a"], [["10.5"]])
        self.assertFalse(self.writer.write_table(table))
        self.assertIn("since no keys values are specified", self.log.getvalue())

    def test_rows_breaking_null_rules_are_skipped(self):
        table = Table("cell", ["entry_id", "length_a"], [
            ["?", "10.5"],
            ["1ABC", "?"],
            ["2XYZ", "11.0"],
        ])
        self.assertTrue(self.writer.write_table(table))
        self.assertIn("row # 1", self.log.getvalue())
        self.assertIn("row # 2", self.log.getvalue())
        self.assertIn('entry_id="2XYZ"', self.stream.getvalue())
        self.assertNotIn('entry_id="1ABC"', self.stream.getvalue())

    def test_table_with_no_valid_rows_writes_nothing(self):
        table = Table("cell", ["entry_id", "length_a"], [["1ABC", "?"]])
        self.assertFalse(self.writer.write_table(table))
        self.assertNotIn("cellCategory", self.stream.getvalue())

    def test_widths_truncate_and_recalculate(self):
        widths = {"id": 2}
        self.writer.write_table(Table("atom_type", ["symbol"], [["Zn"]]))
        self.writer.write_table(Table("entity", ["id"], [["1234"]]), widths=widths)
        self.assertIn('id="12"', self.stream.getvalue())

        widths = {"id": 2}
        self.writer.write_table(Table("entity", ["id"], [["12345"]]), widths=widths,
                                recalc_widths=True)
        self.assertEqual(widths["id"], 5)
        self.assertIn('id="12345"', self.stream.getvalue())

    def test_quiet_writer_logs_nothing(self):
        writer = PdbMlWriter(self.stream, self.dictionary, quiet=True, log=self.log)
        writer.write_table(Table("refine", ["ls_d_res_high"], [["1.5"]]))
        self.assertEqual(self.log.getvalue(), "")


class TestAlternateAtomSite(unittest.TestCase):
    """Test the fixed-width atom record layout."""

    def test_atom_records(self):
        stream = io.StringIO()
        writer = PdbMlWriter(stream, build_dictionary(), quiet=True)
        table = Table("atom_site", ["id", "group_PDB", "label_atom_id", "Cartn_x", "occupancy"], [
            ["1", "ATOM", "N", "-9.288", "1.00"],
            ["2", "HETATM", "C A", "", "0.50"],
        ])
        writer.write_alternate_atom_site_table(table)
        lines = stream.getvalue().splitlines()

        self.assertEqual(lines[0], "<PDBx:category_atom_record>")
        self.assertEqual(lines[-1], "</PDBx:category_atom_record>")
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[1].startswith('   <PDBx:atom_record id=      "1">'))
        self.assertIn("  ATOM  N    -9.288    1.00 </PDBx:atom_record>", lines[1])
        self.assertIn(" C&#32;A ?   0.50 </PDBx:atom_record>", lines[2])

    def test_atom_records_follow_namespace_prefix(self):
        stream = io.StringIO()
        writer = PdbMlWriter(stream, build_dictionary(), ns="pdbx", quiet=True)
        writer.write_alternate_atom_site_table(Table("atom_site", ["id"], [["7"]]))
        self.assertEqual(stream.getvalue(),
                         "<pdbx:category_atom_record>\n"
                         '   <pdbx:atom_record id=      "7"></pdbx:atom_record>\n'
                         "</pdbx:category_atom_record>\n")


if __name__ == '__main__':
    unittest.main()
