"""
Stateless formatting helpers shared by the XML and XSD writers.

Everything here is a pure function: escaping of attribute and text content,
qualification of CIF names as XML names, the type code to XSD type mapping and
the per-type value checks used when writing instance data.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from .common import InvalidTypeCodeError, ValueFormatError
from .defaults import DataValue, TypeCode, XSDType


_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "'": "&apos;",
    '"': "&quot;",
    "&": "&amp;",
    "%": "&#37;",
}
_ESCAPE_RE = re.compile("[<>'\"&%]")
_WHITESPACE_RE = re.compile(r"\s+")
_INLINE_WHITESPACE_RE = re.compile(r"[^\S\n]")
_DROPPED_NAME_CHARS = "[]%<>"
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_SCIENTIFIC_RE = re.compile(r"[eE]")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(:\d{2}:\d{2}|T\d{2}:\d{2}:\d{2})?$")

_XSD_TYPES = {
    TypeCode.INT: XSDType.INTEGER,
    TypeCode.FLOAT: XSDType.DECIMAL,
    TypeCode.STRING: XSDType.STRING,
    TypeCode.TEXT: XSDType.STRING,
    TypeCode.DATETIME: XSDType.DATE,
}


def _escape_chars(value: str) -> str:
    return _ESCAPE_RE.sub(lambda match: _ESCAPES[match.group(0)], value)


def escape_string(value: str, width: Optional[int] = None) -> str:
    """
    Escape a value for use as attribute or string element content.

    Whitespace runs collapse to a single space. When ``width`` is given the
    raw value is truncated to that many characters first.

    :param value: The raw value
    :param width: Optional maximum number of raw characters
    :return: The escaped value
    """
    if width is not None and width < len(value):
        value = value[:width]
    return _escape_chars(_WHITESPACE_RE.sub(" ", value))


def escape_text(value: str) -> str:
    """Escape multi-line text content; newlines are kept, other whitespace becomes a space."""
    return _escape_chars(_INLINE_WHITESPACE_RE.sub(" ", value))


def qualify_name(name: str, ns: str = "", replace_slash: bool = True) -> str:
    """
    Turn a CIF identifier into an XML name, optionally namespace-qualified.

    A leading digit gets an underscore prefix, the characters ``[]%<>`` are
    dropped and ``/`` becomes ``_over_`` unless ``replace_slash`` is False,
    which XPath expressions need.

    :param name: The identifier to qualify
    :param ns: Optional namespace prefix
    :param replace_slash: Whether to replace ``/`` with ``_over_``
    :return: The XML name
    """
    cleaned = "".join(ch for ch in name if ch not in _DROPPED_NAME_CHARS)
    if replace_slash:
        cleaned = cleaned.replace("/", "_over_")
    if cleaned[:1].isdigit():
        cleaned = "_" + cleaned
    return f"{ns}:{cleaned}" if ns else cleaned


def xsd_type(type_code: TypeCode) -> str:
    """Map a type code to its XSD built-in type name."""
    try:
        return _XSD_TYPES[type_code].value
    except (KeyError, TypeError):
        raise InvalidTypeCodeError(type_code)


def split_item_name(item: str) -> Tuple[str, str]:
    """Split ``_category.attribute`` into its category and attribute."""
    name = item[1:] if item.startswith("_") else item
    category, _, attribute = name.partition(".")
    return category, attribute


def get_item_category(item: str) -> str:
    return split_item_name(item)[0]


def get_item_attribute(item: str) -> str:
    return split_item_name(item)[1]


def make_item_name(category: str, attribute: str) -> str:
    return f"_{category}.{attribute}"


def format_integer(value: str) -> str:
    if not _INTEGER_RE.match(value.strip()):
        raise ValueFormatError(value, TypeCode.INT)
    return value.strip()


def format_float(value: str) -> str:
    """Check a float value, rewriting scientific notation in fixed notation."""
    stripped = value.strip()
    if not _FLOAT_RE.match(stripped):
        raise ValueFormatError(value, TypeCode.FLOAT)
    try:
        number = Decimal(stripped)
    except InvalidOperation:
        raise ValueFormatError(value, TypeCode.FLOAT)
    if not number.is_finite():
        raise ValueFormatError(value, TypeCode.FLOAT, "not a finite number")
    if _SCIENTIFIC_RE.search(stripped):
        return format(number, "f")
    return stripped


def format_date(value: str, width: Optional[int] = None) -> str:
    if width is not None and width < len(value):
        value = value[:width]
    formatted = _WHITESPACE_RE.sub("", value)
    if not formatted:
        raise ValueFormatError(value, TypeCode.DATETIME, "empty date")
    if not _DATE_RE.match(formatted):
        raise ValueFormatError(value, TypeCode.DATETIME, "not a yyyy-mm-dd date")
    return formatted


def format_value(value: str, type_code: TypeCode, width: Optional[int] = None) -> str:
    """
    Format a CIF value as XML content for its type.

    Null values format to an empty string.

    :param value: The raw CIF value
    :param type_code: The resolved type of the item
    :param width: Optional maximum width for string and date values
    :return: The escaped, formatted value
    :raises ValueFormatError: If the value does not fit the type
    :raises InvalidTypeCodeError: If the type code cannot be formatted
    """
    if DataValue.is_null(value):
        return DataValue.EMPTY_STRING.value
    if type_code == TypeCode.INT:
        return format_integer(value)
    if type_code == TypeCode.FLOAT:
        return format_float(value)
    if type_code == TypeCode.STRING:
        return escape_string(value, width)
    if type_code == TypeCode.TEXT:
        return escape_text(value)
    if type_code == TypeCode.DATETIME:
        return _escape_chars(format_date(value, width))
    raise InvalidTypeCodeError(type_code)
