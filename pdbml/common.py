"""
Common exceptions and collaborator interfaces for the pdbml package.

This module contains the error taxonomy shared by every component and the
abstract base classes the schema generator and the instance writer consume:
the dictionary metadata store, the parent/child relationship graph and the
renderer used to turn inline CIF examples into PDBML documentation.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from .defaults import TypeCode, DataValue


ComboKey = Tuple[str, ...]
"""Ordered tuple of full item names forming a key of one category."""


class PDBMLError(Exception):
    """Base exception for all pdbml errors."""


class InvalidTypeCodeError(PDBMLError):
    """Raised when a type code has no XSD counterpart."""

    def __init__(self, type_code):
        self.type_code = type_code
        super().__init__(f"Invalid type code: {type_code!r}")


class EmptyKeyrefError(PDBMLError):
    """Raised when a keyref would be written without child fields."""


class ValueFormatError(PDBMLError):
    """Raised when a value cannot be formatted as its declared type."""

    def __init__(self, value: str, type_code: TypeCode, reason: str = ""):
        self.value = value
        self.type_code = type_code
        message = f'Value "{value}" is not a valid {type_code.value}'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ExampleRenderError(PDBMLError):
    """Raised when an inline CIF example cannot be rendered as PDBML."""


class DictionaryError(PDBMLError):
    """Raised when a dictionary file cannot be read."""


class DictionaryMetadata(ABC):
    """
    Read-only view of a DDL2 dictionary.

    Item names are full CIF item names (``_category.attribute``). Lookups of
    unknown categories or items return empty values and never raise.
    """

    @abstractmethod
    def get_version(self) -> str:
        """Return the dictionary version, or an empty string."""

    @abstractmethod
    def get_category_names(self) -> List[str]:
        """Return all category names in lexicographic order."""

    @abstractmethod
    def get_item_names(self, category: str) -> List[str]:
        """Return the full item names of a category in lexicographic order."""

    @abstractmethod
    def get_category_keys(self, category: str) -> List[str]:
        """Return the full names of the key items of a category."""

    @abstractmethod
    def get_category_description(self, category: str) -> str:
        pass

    @abstractmethod
    def get_category_examples(self, category: str) -> List[Tuple[str, str]]:
        """Return ``(case, detail)`` pairs of the category examples."""

    @abstractmethod
    def is_item_defined(self, item: str) -> bool:
        pass

    @abstractmethod
    def is_item_mandatory(self, item: str) -> bool:
        pass

    @abstractmethod
    def is_key_item(self, item: str) -> bool:
        pass

    @abstractmethod
    def get_type_code(self, item: str) -> TypeCode:
        """Return the resolved type code, ``TypeCode.NONE`` for unknown items."""

    @abstractmethod
    def get_enumerations(self, item: str) -> List[str]:
        pass

    @abstractmethod
    def get_range_minimums(self, item: str) -> List[str]:
        pass

    @abstractmethod
    def get_range_maximums(self, item: str) -> List[str]:
        pass

    @abstractmethod
    def get_units(self, item: str) -> str:
        pass

    @abstractmethod
    def get_item_description(self, item: str) -> str:
        pass

    @abstractmethod
    def get_item_examples(self, item: str) -> List[Tuple[str, str]]:
        """Return ``(case, detail)`` pairs of the item examples."""

    @abstractmethod
    def can_be_inapplicable(self, item: str) -> bool:
        """Check if the item may legitimately hold the inapplicable value."""

    @abstractmethod
    def is_bad_child_relation(self, item: str) -> bool:
        """Check if a link where the item is the child must not be enforced."""

    def is_simple_data_type(self, item: str) -> bool:
        """
        Check if the item is encoded with a plain XSD type.

        An item is simple when it has neither enumerations, ranges nor units.
        """
        return not (self.get_enumerations(item) or self.get_range_minimums(item)
                    or self.get_units(item))

    def is_unknown_value_allowed(self, item: str) -> bool:
        """Check if the unknown and empty values are acceptable for the item."""
        return not self.is_key_item(item) and not self.is_item_mandatory(item)

    def are_all_key_items(self, items: Sequence[str]) -> bool:
        return all(self.is_key_item(item) for item in items)

    def standardize_enum_value(self, item: str, value: str) -> str:
        """Return the dictionary spelling of an enumerated value.

        Matching is case-insensitive; values that match no enumeration are
        returned unchanged.
        """
        if DataValue.is_null(value):
            return value
        lowered = value.lower()
        for enum_value in self.get_enumerations(item):
            if enum_value.lower() == lowered:
                return enum_value
        return value


class ParentChildGraph(ABC):
    """Parent/child item linkage of a dictionary."""

    @abstractmethod
    def get_combo_keys(self, category: str) -> List[ComboKey]:
        """Return the parent-side combo keys of a category."""

    @abstractmethod
    def get_children_keys(self, combo_key: ComboKey) -> List[List[ComboKey]]:
        """
        Return the child keys referring to a parent combo key.

        The outer list holds one entry per child category; each entry lists
        the child combo keys of that category, each of the parent key's arity.
        """

    @abstractmethod
    def is_linked_item(self, item: str) -> bool:
        """Check if the item takes part in any parent/child link."""


class ExampleRenderer(ABC):
    """Turns an inline CIF example into PDBML text for documentation."""

    @abstractmethod
    def render(self, text: str) -> str:
        """
        Render CIF example text.

        :param text: CIF text without a data block header
        :return: The rendered PDBML fragment
        :raises ExampleRenderError: If the text cannot be parsed or rendered
        """

    def __call__(self, text: str) -> str:
        return self.render(text)
