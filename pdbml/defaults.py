"""
PDBML Defaults - Enum classes for constants used across the package

This module provides Enum classes for genuinely constant values that don't
depend on dictionary content: null markers, type codes, XML/XSD tag and
attribute names, naming suffixes and the identity constraint policies.
"""

from enum import Enum
from typing import Set


class DataValue(Enum):
    """Enum for special data value representations in mmCIF"""
    UNKNOWN = "?"
    INAPPLICABLE = "."
    EMPTY_STRING = ""

    @classmethod
    def is_null(cls, value: str) -> bool:
        """Check if a value represents null (unknown, inapplicable or empty)"""
        return value in {cls.UNKNOWN.value, cls.INAPPLICABLE.value, cls.EMPTY_STRING.value}


class TypeCode(Enum):
    """Semantic data types an item value can be formatted as"""
    NONE = "none"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    TEXT = "text"
    DATETIME = "datetime"


class DataType(Enum):
    """mmCIF dictionary type codes and primitive codes"""
    # Primitive codes from _item_type_list.primitive_code
    NUMB = "numb"

    # Type codes with a fixed meaning
    INT = "int"
    POSITIVE_INT = "positive_int"
    NON_NEGATIVE_INT = "non_negative_int"
    FLOAT = "float"
    TEXT = "text"
    DATE_PREFIX = "yyyy-mm-dd"

    @classmethod
    def get_integer_types(cls) -> Set[str]:
        """Get all integer type codes as a set for matching."""
        return {cls.INT.value, cls.POSITIVE_INT.value, cls.NON_NEGATIVE_INT.value}

    @classmethod
    def resolve(cls, type_code: str, primitive_code: str = "") -> TypeCode:
        """Resolve a dictionary type code to the TypeCode used for formatting."""
        code = (type_code or "").lower()
        primitive = (primitive_code or "").lower()

        if not code:
            return TypeCode.NONE
        if code.startswith(cls.DATE_PREFIX.value):
            return TypeCode.DATETIME
        if code in cls.get_integer_types():
            return TypeCode.INT
        if code == cls.FLOAT.value:
            return TypeCode.FLOAT
        if primitive == cls.NUMB.value:
            return TypeCode.INT if code.endswith("int") else TypeCode.FLOAT
        if code == cls.TEXT.value:
            return TypeCode.TEXT
        return TypeCode.STRING


class XSDType(Enum):
    """XSD built-in types the generated schema refers to"""
    INTEGER = "xsd:integer"
    DECIMAL = "xsd:decimal"
    STRING = "xsd:string"
    DATE = "xsd:date"


class XMLConstant(Enum):
    """Unified enum for XML and PDBML constants"""
    # Namespaces
    XSD_URI = "http://www.w3.org/2001/XMLSchema"
    XSI_URI = "http://www.w3.org/2001/XMLSchema-instance"
    SCHEMA_LOCATION_DIRECTORY = "http://pdbml.pdb.org/schema/"

    # Namespace prefixes
    XSD_PREFIX = "xsd"
    XSI_PREFIX = "xsi"
    PDBX_PREFIX = "PDBx"
    SCHEMA_PREFIX = "pdbx"

    # PDBML elements and attributes
    DATABLOCK = "datablock"
    DATABLOCK_NAME = "datablockName"

    # XML declaration
    XML_VERSION = "1.0"
    ENCODING = "UTF-8"

    # Schema comment
    DEFAULT_DICTIONARY_VERSION = "1.00"
    CONTACT = "John Westbrook (jwest@rcsb.rutgers.edu)"


class XSDTag(Enum):
    """XML Schema tag names"""
    SCHEMA = "schema"
    COMPLEX_TYPE = "complexType"
    SEQUENCE = "sequence"
    ALL = "all"
    ANNOTATION = "annotation"
    DOCUMENTATION = "documentation"
    SIMPLE_TYPE = "simpleType"
    RESTRICTION = "restriction"
    ENUMERATION = "enumeration"
    UNION = "union"
    SIMPLE_CONTENT = "simpleContent"
    EXTENSION = "extension"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    MIN_INCLUSIVE = "minInclusive"
    MAX_INCLUSIVE = "maxInclusive"
    MIN_EXCLUSIVE = "minExclusive"
    MAX_EXCLUSIVE = "maxExclusive"
    UNIQUE = "unique"
    FIELD = "field"
    KEY = "key"
    KEYREF = "keyref"
    SELECTOR = "selector"


class XSDAttribute(Enum):
    """XML Schema attribute names"""
    NAME = "name"
    VALUE = "value"
    BASE = "base"
    FIXED = "fixed"
    USE = "use"
    MIN_OCCURS = "minOccurs"
    MAX_OCCURS = "maxOccurs"
    NILLABLE = "nillable"
    XPATH = "xpath"
    TYPE = "type"
    REFER = "refer"
    TARGET_NAMESPACE = "targetNamespace"
    ELEMENT_FORM_DEFAULT = "elementFormDefault"
    ATTRIBUTE_FORM_DEFAULT = "attributeFormDefault"


class TypeSuffix(Enum):
    """Type naming suffixes"""
    TYPE = "Type"
    CATEGORY = "Category"
    KEYREF = "Keyref"


class ConstraintKind(Enum):
    """XSD identity constraint used for a category key"""
    KEY = "key"
    UNIQUE = "unique"

    @property
    def suffix(self) -> str:
        """Name suffix used when naming a constraint of this kind."""
        return "Key" if self is ConstraintKind.KEY else "Unique"


class KeyrefPolicy(Enum):
    """Rule set deciding which linked items take part in keys and keyrefs.

    KEY_ITEMS_ONLY: only category key items may appear in parent or child
    keys; keyrefs only point at the intrinsic category key.
    MANDATORY_KEY_SUPERSETS: non-key items must be mandatory and never
    inapplicable; parent keys must be supersets of the category key.
    MANDATORY_ITEMS: every item must be mandatory and never inapplicable;
    any parent combo key may be referenced.
    DETERMINABLE_ITEMS: items that can be inapplicable are excluded,
    mandatoriness is not required; any parent combo key may be referenced.
    """
    KEY_ITEMS_ONLY = "key_items_only"
    MANDATORY_KEY_SUPERSETS = "mandatory_key_supersets"
    MANDATORY_ITEMS = "mandatory_items"
    DETERMINABLE_ITEMS = "determinable_items"


class DictItemKey(Enum):
    """DDL2 dictionary tags read by the dictionary parser"""
    DICTIONARY_VERSION = "_dictionary.version"
    CATEGORY_ID = "_category.id"
    CATEGORY_DESCRIPTION = "_category.description"
    CATEGORY_MANDATORY_CODE = "_category.mandatory_code"
    CATEGORY_KEY_NAME = "_category_key.name"
    CATEGORY_EXAMPLES_PREFIX = "_category_examples."
    ITEM_PREFIX = "_item."
    ITEM_DESCRIPTION = "_item_description.description"
    ITEM_TYPE_CODE = "_item_type.code"
    ITEM_UNITS_CODE = "_item_units.code"
    ITEM_ENUMERATION_VALUE = "_item_enumeration.value"
    ITEM_RANGE_PREFIX = "_item_range."
    ITEM_EXAMPLES_PREFIX = "_item_examples."
    ITEM_LINKED_PREFIX = "_item_linked."
    ITEM_TYPE_LIST_PREFIX = "_item_type_list."
    LINKED_GROUP_LIST_PREFIX = "_pdbx_item_linked_group_list."


class MandatoryCode(Enum):
    """Values of _item.mandatory_code"""
    YES = "yes"


class FileOperation(Enum):
    """File operation constants"""
    WRITE = "w"
    ENCODING = "utf-8"
    XSD_EXT = ".xsd"
    VERSION_SEPARATOR = "-v"
