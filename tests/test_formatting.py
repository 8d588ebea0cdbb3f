#!/usr/bin/env python3
"""
Tests for the escaping, naming and value formatting helpers.
"""

import unittest

from pdbml import InvalidTypeCodeError, TypeCode, ValueFormatError
from pdbml.defaults import DataType
from pdbml.formatting import (
    escape_string,
    escape_text,
    format_float,
    format_value,
    get_item_attribute,
    get_item_category,
    make_item_name,
    qualify_name,
    xsd_type,
)


class TestEscaping(unittest.TestCase):
    """Test attribute and text escaping."""

    def test_escape_special_characters(self):
        self.assertEqual(escape_string("a<b>&'\"%"), "a&lt;b&gt;&amp;&apos;&quot;&#37;")

    def test_escape_string_collapses_whitespace(self):
        self.assertEqual(escape_string("ALPHA   \n\t HELIX"), "ALPHA HELIX")

    def test_escape_string_truncates_before_escaping(self):
        self.assertEqual(escape_string("a&bcdef", width=2), "a&amp;")
        self.assertEqual(escape_string("abc", width=10), "abc")

    def test_escape_text_keeps_newlines(self):
        self.assertEqual(escape_text("line one\n\tline <two>"), "line one\n line &lt;two&gt;")

    def test_escape_text_keeps_indentation(self):
        self.assertEqual(escape_text("\n   <PDBx:cell"), "\n   &lt;PDBx:cell")


class TestNames(unittest.TestCase):
    """Test XML name qualification and item name helpers."""

    def test_qualify_plain_name(self):
        self.assertEqual(qualify_name("atom_site"), "atom_site")
        self.assertEqual(qualify_name("atom_site", "PDBx"), "PDBx:atom_site")

    def test_qualify_leading_digit(self):
        self.assertEqual(qualify_name("2nd_item"), "_2nd_item")

    def test_qualify_drops_bracket_characters(self):
        self.assertEqual(qualify_name("matrix[1][2]"), "matrix12")
        self.assertEqual(qualify_name("percent_<%>"), "percent_")

    def test_qualify_slash(self):
        self.assertEqual(qualify_name("intensity_I/sigma"), "intensity_I_over_sigma")
        self.assertEqual(qualify_name("a/b", "PDBx", replace_slash=False), "PDBx:a/b")

    def test_item_name_parts(self):
        self.assertEqual(get_item_category("_atom_site.Cartn_x"), "atom_site")
        self.assertEqual(get_item_attribute("_atom_site.Cartn_x"), "Cartn_x")
        self.assertEqual(make_item_name("atom_site", "Cartn_x"), "_atom_site.Cartn_x")


class TestTypes(unittest.TestCase):
    """Test type resolution and the XSD type mapping."""

    def test_xsd_types(self):
        self.assertEqual(xsd_type(TypeCode.INT), "xsd:integer")
        self.assertEqual(xsd_type(TypeCode.FLOAT), "xsd:decimal")
        self.assertEqual(xsd_type(TypeCode.STRING), "xsd:string")
        self.assertEqual(xsd_type(TypeCode.TEXT), "xsd:string")
        self.assertEqual(xsd_type(TypeCode.DATETIME), "xsd:date")

    def test_xsd_type_of_none_fails(self):
        with self.assertRaises(InvalidTypeCodeError):
            xsd_type(TypeCode.NONE)

    def test_resolve_dictionary_type_codes(self):
        self.assertEqual(DataType.resolve("positive_int", "numb"), TypeCode.INT)
        self.assertEqual(DataType.resolve("float", "numb"), TypeCode.FLOAT)
        self.assertEqual(DataType.resolve("float-range", "numb"), TypeCode.FLOAT)
        self.assertEqual(DataType.resolve("my_int", "numb"), TypeCode.INT)
        self.assertEqual(DataType.resolve("yyyy-mm-dd:hh:mm", "char"), TypeCode.DATETIME)
        self.assertEqual(DataType.resolve("text", "char"), TypeCode.TEXT)
        self.assertEqual(DataType.resolve("code", "uchar"), TypeCode.STRING)
        self.assertEqual(DataType.resolve("", ""), TypeCode.NONE)


class TestValueFormatting(unittest.TestCase):
    """Test per-type value formatting."""

    def test_null_values_format_empty(self):
        for value in ("?", ".", ""):
            self.assertEqual(format_value(value, TypeCode.FLOAT), "")

    def test_integer(self):
        self.assertEqual(format_value("-12", TypeCode.INT), "-12")
        with self.assertRaises(ValueFormatError):
            format_value("1.5", TypeCode.INT)

    def test_float(self):
        self.assertEqual(format_value("79.100", TypeCode.FLOAT), "79.100")
        self.assertEqual(format_float("1.5E+01"), "15")
        self.assertEqual(format_float("2.5e-3"), "0.0025")
        with self.assertRaises(ValueFormatError):
            format_value("abc", TypeCode.FLOAT)

    def test_non_finite_float_fails(self):
        with self.assertRaises(ValueFormatError):
            format_float("nan")

    def test_float_rejects_non_decimal_literals(self):
        for value in ("1_0.5", "0x1A", "1.5.2", "+", "Infinity"):
            with self.assertRaises(ValueFormatError):
                format_float(value)
        self.assertEqual(format_float(".5"), ".5")
        self.assertEqual(format_float("-3."), "-3.")

    def test_string_width(self):
        self.assertEqual(format_value("HELIX_P", TypeCode.STRING, width=5), "HELIX")

    def test_date(self):
        self.assertEqual(format_value(" 2024-01-31 ", TypeCode.DATETIME), "2024-01-31")
        self.assertEqual(format_value("2024-01-31:10:45", TypeCode.DATETIME), "2024-01-31:10:45")
        self.assertEqual(format_value("2024-01-31T10:45:00", TypeCode.DATETIME),
                         "2024-01-31T10:45:00")

    def test_date_rejects_other_forms(self):
        for value in ("yesterday", "31/01/2024", "2024-1-31", "2024-01-31:10"):
            with self.assertRaises(ValueFormatError):
                format_value(value, TypeCode.DATETIME)

    def test_text_keeps_lines(self):
        self.assertEqual(format_value("first\nsecond", TypeCode.TEXT), "first\nsecond")

    def test_untyped_value_fails(self):
        with self.assertRaises(InvalidTypeCodeError):
            format_value("x", TypeCode.NONE)


if __name__ == '__main__':
    unittest.main()
