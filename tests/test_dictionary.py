#!/usr/bin/env python3
"""
Test suite for reading DDL2 dictionaries with DictionaryParser.
"""

import os
import tempfile
import unittest

from pdbml import DictionaryError, DictionaryParser, TypeCode
from tests.test_utils import DDL2_DICTIONARY, build_dictionary


class TestDictionaryParser(unittest.TestCase):
    """Test categories, items and links read from a small DDL2 dictionary."""

    def setUp(self):
        self.info = DictionaryParser(quiet=True).parse_string(DDL2_DICTIONARY)

    def test_version(self):
        self.assertEqual(self.info.get_version(), "5.100")

    def test_categories(self):
        self.assertEqual(self.info.get_category_names(), ["cell", "entry", "exptl"])
        self.assertEqual(self.info.get_category_keys("cell"), ["_cell.entry_id"])
        self.assertEqual(self.info.get_category_keys("exptl"),
                         ["_exptl.entry_id", "_exptl.method"])
        self.assertTrue(self.info.categories["entry"].mandatory)
        self.assertFalse(self.info.categories["cell"].mandatory)
        self.assertIn("only one entry per data block", self.info.get_category_description("entry"))

    def test_category_examples(self):
        examples = self.info.get_category_examples("cell")
        self.assertEqual(len(examples), 1)
        case, detail = examples[0]
        self.assertIn("_cell.length_a   10.5", case)
        self.assertIn("Example 1 - based on PDB entry 1ABC.", detail)

    def test_items(self):
        self.assertEqual(self.info.get_item_names("cell"),
                         ["_cell.Z_PDB", "_cell.entry_id", "_cell.length_a"])
        self.assertTrue(self.info.is_item_defined("_exptl.method"))
        self.assertFalse(self.info.is_item_defined("_cell.volume"))
        self.assertTrue(self.info.is_item_mandatory("_cell.entry_id"))
        self.assertFalse(self.info.is_item_mandatory("_cell.length_a"))
        self.assertTrue(self.info.is_key_item("_exptl.method"))
        self.assertFalse(self.info.is_key_item("_cell.length_a"))

    def test_item_types(self):
        self.assertEqual(self.info.get_type_code("_cell.length_a"), TypeCode.FLOAT)
        self.assertEqual(self.info.get_type_code("_cell.Z_PDB"), TypeCode.INT)
        self.assertEqual(self.info.get_type_code("_exptl.method"), TypeCode.STRING)
        self.assertEqual(self.info.get_type_code("_cell.entry_id"), TypeCode.STRING)
        self.assertEqual(self.info.get_type_code("_cell.volume"), TypeCode.NONE)

    def test_type_inherited_from_parent(self):
        self.assertEqual(self.info.items["_exptl.entry_id"].type_code, "code")

    def test_item_restrictions(self):
        self.assertEqual(self.info.get_units("_cell.length_a"), "angstroms")
        self.assertEqual(self.info.get_range_minimums("_cell.length_a"), ["0.0", "0.0"])
        self.assertEqual(self.info.get_range_maximums("_cell.length_a"), [".", "0.0"])
        self.assertEqual(self.info.get_enumerations("_exptl.method"),
                         ["X-RAY DIFFRACTION", "NEUTRON DIFFRACTION"])
        self.assertFalse(self.info.is_simple_data_type("_cell.length_a"))
        self.assertTrue(self.info.is_simple_data_type("_cell.Z_PDB"))

    def test_item_description(self):
        self.assertIn("pointer to _entry.id", self.info.get_item_description("_cell.entry_id"))

    def test_links_from_group_list(self):
        links = sorted(self.info.links, key=lambda link: link.child_name)
        self.assertEqual(len(links), 2)
        self.assertEqual(links[0].child_category, "cell")
        self.assertEqual(links[0].link_group_id, "1")
        self.assertEqual(links[0].child_name, "_cell.entry_id")
        self.assertEqual(links[0].parent_name, "_entry.id")
        self.assertEqual(links[0].parent_category, "entry")

    def test_links_fall_back_to_item_linked(self):
        text = DDL2_DICTIONARY.split("loop_\n_pdbx_item_linked_group_list")[0]
        info = DictionaryParser(quiet=True).parse_string(text)
        self.assertEqual(len(info.links), 1)
        link = info.links[0]
        self.assertEqual((link.child_category, link.link_group_id, link.child_name,
                          link.parent_name, link.parent_category),
                         ("exptl", "1", "_exptl.entry_id", "_entry.id", "entry"))

    def test_item_options(self):
        info = DictionaryParser(inapplicable_items=["_cell.length_a"],
                                bad_child_relations=["_exptl.entry_id"],
                                quiet=True).parse_string(DDL2_DICTIONARY)
        self.assertTrue(info.can_be_inapplicable("_cell.length_a"))
        self.assertFalse(info.can_be_inapplicable("_cell.Z_PDB"))
        self.assertTrue(info.is_bad_child_relation("_exptl.entry_id"))


class TestDictionaryFiles(unittest.TestCase):
    """Test reading dictionaries from files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        for name in os.listdir(self.temp_dir):
            os.remove(os.path.join(self.temp_dir, name))
        os.rmdir(self.temp_dir)

    def test_parse_file(self):
        path = os.path.join(self.temp_dir, "mini.dic")
        with open(path, "w", encoding="utf-8") as f:
            f.write(DDL2_DICTIONARY)
        info = DictionaryParser(quiet=True).parse(path)
        self.assertEqual(len(info.categories), 3)
        self.assertEqual(len(info.items), 6)

    def test_summary_is_printed(self):
        path = os.path.join(self.temp_dir, "mini.dic")
        with open(path, "w", encoding="utf-8") as f:
            f.write(DDL2_DICTIONARY)
        log_path = os.path.join(self.temp_dir, "parse.log")
        with open(log_path, "w", encoding="utf-8") as log:
            DictionaryParser(log=log).parse(path)
        with open(log_path, encoding="utf-8") as log:
            self.assertIn("Parsed 3 categories, 6 items, 2 links", log.read())

    def test_missing_file(self):
        with self.assertRaises(DictionaryError):
            DictionaryParser(quiet=True).parse(os.path.join(self.temp_dir, "missing.dic"))

    def test_malformed_dictionary(self):
        with self.assertRaises(DictionaryError):
            DictionaryParser(quiet=True).parse_string("data_bad\n_a.b\n;never closed\n")


class TestDictionaryInfo(unittest.TestCase):
    """Test the in-memory dictionary used by the other suites."""

    def setUp(self):
        self.info = build_dictionary()

    def test_unknown_names_are_empty(self):
        self.assertEqual(self.info.get_item_names("refine"), [])
        self.assertEqual(self.info.get_category_keys("refine"), [])
        self.assertEqual(self.info.get_category_description("refine"), "")
        self.assertEqual(self.info.get_enumerations("_refine.x"), [])
        self.assertFalse(self.info.is_item_mandatory("_refine.x"))

    def test_unknown_value_allowed(self):
        self.assertFalse(self.info.is_unknown_value_allowed("_cell.entry_id"))
        self.assertFalse(self.info.is_unknown_value_allowed("_cell.length_a"))
        self.assertTrue(self.info.is_unknown_value_allowed("_cell.Z_PDB"))

    def test_standardize_enum_value(self):
        self.assertEqual(self.info.standardize_enum_value("_atom_site.group_PDB", "hetatm"),
                         "HETATM")
        self.assertEqual(self.info.standardize_enum_value("_atom_site.group_PDB", "OTHER"),
                         "OTHER")
        self.assertEqual(self.info.standardize_enum_value("_atom_site.group_PDB", "?"), "?")

    def test_all_key_items(self):
        self.assertTrue(self.info.are_all_key_items(["_entry.id"]))
        self.assertFalse(self.info.are_all_key_items(["_cell.entry_id", "_cell.Z_PDB"]))


if __name__ == '__main__':
    unittest.main()
