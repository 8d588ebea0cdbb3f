"""
pdbml - PDBML schema and instance generation from DDL2 dictionaries

Generates the XSD describing the PDBML representation of a dictionary, with
key/unique/keyref constraints derived from its parent/child links, and writes
mmCIF data as PDBML documents that validate against it.
"""

from .common import (
    ComboKey,
    DictionaryError,
    DictionaryMetadata,
    EmptyKeyrefError,
    ExampleRenderError,
    ExampleRenderer,
    InvalidTypeCodeError,
    ParentChildGraph,
    PDBMLError,
    ValueFormatError,
)
from .defaults import ConstraintKind, KeyrefPolicy, TypeCode
from .dictionary import DictionaryInfo, DictionaryParser, ItemLink
from .examples import CifExampleRenderer, format_cif_description, format_cif_example
from .handler import PDBMLHandler
from .keys import KeyFilter
from .models import CategoryDefinition, DataBlock, ItemDefinition, Table
from .parser import CifDataParser
from .pdbml_writer import PdbMlWriter, make_category_element_name
from .ranges import aggregate_inclusive_ranges, has_multiple_sub_ranges
from .relations import ParentChild
from .schema import (
    PdbMlSchema,
    make_category_type_name,
    make_full_schema_file_name,
    make_schema_file_name,
)
from .writer import XmlWriter
from .xsd_writer import XsdWriter

__version__ = "0.1.0"

__all__ = [
    "CategoryDefinition",
    "CifDataParser",
    "CifExampleRenderer",
    "ComboKey",
    "ConstraintKind",
    "DataBlock",
    "DictionaryError",
    "DictionaryInfo",
    "DictionaryMetadata",
    "DictionaryParser",
    "EmptyKeyrefError",
    "ExampleRenderError",
    "ExampleRenderer",
    "InvalidTypeCodeError",
    "ItemDefinition",
    "ItemLink",
    "KeyFilter",
    "KeyrefPolicy",
    "ParentChild",
    "ParentChildGraph",
    "PDBMLError",
    "PDBMLHandler",
    "PdbMlSchema",
    "PdbMlWriter",
    "Table",
    "TypeCode",
    "ValueFormatError",
    "XmlWriter",
    "XsdWriter",
    "aggregate_inclusive_ranges",
    "format_cif_description",
    "format_cif_example",
    "has_multiple_sub_ranges",
    "make_category_element_name",
    "make_category_type_name",
    "make_full_schema_file_name",
    "make_schema_file_name",
]
