from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .defaults import DataType, TypeCode


class DataNode(ABC):
    """Abstract base class for all named nodes of the data model."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the name of the node."""
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name})"


class ItemDefinition(DataNode):
    """Dictionary definition of one item (a column of a category)."""

    def __init__(
        self,
        name: str,
        category: str,
        mandatory: bool = False,
        type_code: str = "",
        primitive_code: str = "",
        enumerations: Optional[List[str]] = None,
        range_minimums: Optional[List[str]] = None,
        range_maximums: Optional[List[str]] = None,
        units: str = "",
        description: str = "",
        examples: Optional[List[Tuple[str, str]]] = None,
    ):
        """
        :param name: Full item name, e.g. ``_cell.length_a``
        :param category: Name of the owning category
        :param mandatory: Whether the item is mandatory
        :param type_code: Dictionary type code, e.g. ``float``
        :param primitive_code: Primitive code of the type code, e.g. ``numb``
        :param enumerations: Permitted values
        :param range_minimums: Range minimums, parallel to ``range_maximums``
        :param range_maximums: Range maximums, parallel to ``range_minimums``
        :param units: Units code
        :param description: Free-text description
        :param examples: ``(case, detail)`` pairs
        """
        self._name = name
        self.category = category
        self.mandatory = mandatory
        self.type_code = type_code
        self.primitive_code = primitive_code
        self.enumerations = list(enumerations or [])
        self.range_minimums = list(range_minimums or [])
        self.range_maximums = list(range_maximums or [])
        self.units = units
        self.description = description
        self.examples = list(examples or [])
        if len(self.range_minimums) != len(self.range_maximums):
            raise ValueError(f"Item {name} has unpaired range bounds")

    @property
    def name(self) -> str:
        return self._name

    @property
    def resolved_type(self) -> TypeCode:
        return DataType.resolve(self.type_code, self.primitive_code)

    def add_range(self, minimum: str, maximum: str) -> None:
        self.range_minimums.append(minimum)
        self.range_maximums.append(maximum)


class CategoryDefinition(DataNode):
    """Dictionary definition of one category (a relational table)."""

    def __init__(
        self,
        name: str,
        keys: Optional[Sequence[str]] = None,
        description: str = "",
        examples: Optional[List[Tuple[str, str]]] = None,
        mandatory: bool = False,
    ):
        self._name = name
        self.keys = list(keys or [])
        self.description = description
        self.examples = list(examples or [])
        self.mandatory = mandatory
        self.item_names: List[str] = []

    @property
    def name(self) -> str:
        return self._name


class Table(DataNode):
    """A table of raw CIF values: named columns and rows of strings."""

    def __init__(self, name: str, columns: Sequence[str], rows: Optional[Sequence[Sequence[str]]] = None):
        """
        :param name: Category name without the leading underscore
        :param columns: Attribute names of the columns
        :param rows: Rows of raw values, one value per column
        """
        self._name = name
        self.columns = list(columns)
        self.rows: List[List[str]] = []
        for row in rows or []:
            self.add_row(row)

    @property
    def name(self) -> str:
        return self._name

    def add_row(self, row: Sequence[str]) -> None:
        if len(row) != len(self.columns):
            raise ValueError(
                f"Row of {len(row)} values does not match the {len(self.columns)} "
                f"columns of table {self._name}"
            )
        self.rows.append(list(row))

    def has_column(self, column: str) -> bool:
        return column in self.columns

    def column_index(self, column: str) -> int:
        return self.columns.index(column)

    def get_value(self, row_index: int, column: str) -> str:
        return self.rows[row_index][self.column_index(column)]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[List[str]]:
        return iter(self.rows)


class DataBlock(DataNode):
    """A named group of tables, in the order they were read."""

    def __init__(self, name: str):
        self._name = name
        self._tables: Dict[str, Table] = {}

    @property
    def name(self) -> str:
        return self._name

    def add_table(self, table: Table) -> None:
        self._tables[table.name] = table

    def __getitem__(self, name: str) -> Table:
        return self._tables[name]

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables.values())

    def __len__(self) -> int:
        return len(self._tables)
