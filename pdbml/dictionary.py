"""
DDL2 dictionary metadata.

DictionaryInfo is an in-memory DictionaryMetadata built from category and
item definitions. DictionaryParser fills one from a DDL2 dictionary file
(e.g. mmcif_pdbx_v50.dic) read with gemmi: save frames give the category and
item definitions, the block-level loops give the item type list and the
parent/child link groups.
"""

import sys
from pathlib import Path
from typing import IO, Dict, Iterable, List, Optional, Set, Tuple, Union

import gemmi

from .common import DictionaryError, DictionaryMetadata
from .defaults import DataValue, DictItemKey, MandatoryCode, TypeCode
from .formatting import get_item_category
from .models import CategoryDefinition, ItemDefinition
from .parser import unquote


class ItemLink:
    """One parent/child item pair of a link group."""

    def __init__(self, child_category: str, link_group_id: str, child_name: str,
                 parent_name: str, parent_category: str):
        self.child_category = child_category
        self.link_group_id = link_group_id
        self.child_name = child_name
        self.parent_name = parent_name
        self.parent_category = parent_category

    def __repr__(self):
        return (f"ItemLink({self.parent_name} -> {self.child_name}, "
                f"group={self.link_group_id})")


class DictionaryInfo(DictionaryMetadata):
    """In-memory dictionary metadata."""

    def __init__(
        self,
        version: str = "",
        inapplicable_items: Optional[Iterable[str]] = None,
        bad_child_relations: Optional[Iterable[str]] = None,
    ):
        """
        :param version: Dictionary version
        :param inapplicable_items: Items that may hold the inapplicable value
            even when mandatory
        :param bad_child_relations: Child items whose links must not be
            enforced
        """
        self.version = version
        self.categories: Dict[str, CategoryDefinition] = {}
        self.items: Dict[str, ItemDefinition] = {}
        self.links: List[ItemLink] = []
        self.inapplicable_items: Set[str] = set(inapplicable_items or [])
        self.bad_child_relations: Set[str] = set(bad_child_relations or [])

    def add_category(self, category: CategoryDefinition) -> None:
        self.categories[category.name] = category
        for item in self.items.values():
            if item.category == category.name and item.name not in category.item_names:
                category.item_names.append(item.name)

    def add_item(self, item: ItemDefinition) -> None:
        self.items[item.name] = item
        category = self.categories.get(item.category)
        if category is not None and item.name not in category.item_names:
            category.item_names.append(item.name)

    def add_link(self, link: ItemLink) -> None:
        self.links.append(link)

    # DictionaryMetadata

    def get_version(self) -> str:
        return self.version

    def get_category_names(self) -> List[str]:
        return sorted(self.categories)

    def get_item_names(self, category: str) -> List[str]:
        definition = self.categories.get(category)
        return sorted(definition.item_names) if definition else []

    def get_category_keys(self, category: str) -> List[str]:
        definition = self.categories.get(category)
        return list(definition.keys) if definition else []

    def get_category_description(self, category: str) -> str:
        definition = self.categories.get(category)
        return definition.description if definition else ""

    def get_category_examples(self, category: str) -> List[Tuple[str, str]]:
        definition = self.categories.get(category)
        return list(definition.examples) if definition else []

    def is_item_defined(self, item: str) -> bool:
        return item in self.items

    def is_item_mandatory(self, item: str) -> bool:
        definition = self.items.get(item)
        return definition.mandatory if definition else False

    def is_key_item(self, item: str) -> bool:
        definition = self.categories.get(get_item_category(item))
        return definition is not None and item in definition.keys

    def get_type_code(self, item: str) -> TypeCode:
        """Resolved type of an item; defined items without a type code are strings."""
        definition = self.items.get(item)
        if definition is None:
            return TypeCode.NONE
        resolved = definition.resolved_type
        return TypeCode.STRING if resolved == TypeCode.NONE else resolved

    def get_enumerations(self, item: str) -> List[str]:
        definition = self.items.get(item)
        return list(definition.enumerations) if definition else []

    def get_range_minimums(self, item: str) -> List[str]:
        definition = self.items.get(item)
        return list(definition.range_minimums) if definition else []

    def get_range_maximums(self, item: str) -> List[str]:
        definition = self.items.get(item)
        return list(definition.range_maximums) if definition else []

    def get_units(self, item: str) -> str:
        definition = self.items.get(item)
        return definition.units if definition else ""

    def get_item_description(self, item: str) -> str:
        definition = self.items.get(item)
        return definition.description if definition else ""

    def get_item_examples(self, item: str) -> List[Tuple[str, str]]:
        definition = self.items.get(item)
        return list(definition.examples) if definition else []

    def can_be_inapplicable(self, item: str) -> bool:
        return item in self.inapplicable_items

    def is_bad_child_relation(self, item: str) -> bool:
        return item in self.bad_child_relations


def _value(block, tag: str) -> str:
    """Unquoted single value of a tag, or an empty string."""
    value = block.find_value(tag)
    return unquote(value) if value is not None else DataValue.EMPTY_STRING.value


def _values(block, tag: str) -> List[str]:
    return [unquote(value) for value in block.find_values(tag)]


def _rows(block, prefix: str, tags: List[str]) -> List[List[str]]:
    """Rows of a category; tags prefixed with ``?`` are optional."""
    table = block.find(prefix, tags)
    rows = []
    for row in table:
        rows.append([unquote(row[i]) if row.has(i) else DataValue.EMPTY_STRING.value
                     for i in range(len(tags))])
    return rows


class DictionaryParser:
    """Parses DDL2 dictionary files into DictionaryInfo objects."""

    def __init__(self, inapplicable_items: Optional[Iterable[str]] = None,
                 bad_child_relations: Optional[Iterable[str]] = None,
                 quiet: bool = False, log: Optional[IO] = None):
        """
        :param inapplicable_items: Passed on to DictionaryInfo
        :param bad_child_relations: Passed on to DictionaryInfo
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics
        """
        self.inapplicable_items = list(inapplicable_items or [])
        self.bad_child_relations = list(bad_child_relations or [])
        self.quiet = quiet
        self.log = log

    def _print(self, message: str) -> None:
        if not self.quiet:
            print(message, file=self.log or sys.stderr)

    def parse(self, dict_path: Union[str, Path]) -> DictionaryInfo:
        """
        Parse a dictionary file.

        :param dict_path: Path to the DDL2 dictionary
        :return: The dictionary metadata
        :raises DictionaryError: If the file cannot be read or parsed
        """
        if not Path(dict_path).exists():
            raise DictionaryError(f"Dictionary file not found: {dict_path}")
        try:
            doc = gemmi.cif.read_file(str(dict_path))
        except (RuntimeError, ValueError) as e:
            raise DictionaryError(f"Cannot parse dictionary {dict_path}: {e}") from e
        return self._convert_document(doc)

    def parse_string(self, text: str) -> DictionaryInfo:
        try:
            doc = gemmi.cif.read_string(text)
        except (RuntimeError, ValueError) as e:
            raise DictionaryError(f"Cannot parse dictionary: {e}") from e
        return self._convert_document(doc)

    def _convert_document(self, doc) -> DictionaryInfo:
        if len(doc) == 0:
            raise DictionaryError("Dictionary holds no data block")
        block = doc[0]

        info = DictionaryInfo(
            _value(block, DictItemKey.DICTIONARY_VERSION.value),
            self.inapplicable_items,
            self.bad_child_relations,
        )
        primitive_codes = {
            code: primitive for code, primitive in
            _rows(block, DictItemKey.ITEM_TYPE_LIST_PREFIX.value, ["code", "primitive_code"])
        }

        frame_links: List[Tuple[str, str]] = []
        for item in block:
            if item.frame is None:
                continue
            frame = item.frame
            if frame.find_value(DictItemKey.CATEGORY_ID.value) is not None:
                info.add_category(self._parse_category_frame(frame))
            else:
                definition = self._parse_item_frame(frame, primitive_codes)
                if definition is not None:
                    info.add_item(definition)
                    frame_links.extend(_rows(frame, DictItemKey.ITEM_LINKED_PREFIX.value,
                                             ["child_name", "parent_name"]))

        self._inherit_types(info, frame_links, primitive_codes)

        group_rows = _rows(block, DictItemKey.LINKED_GROUP_LIST_PREFIX.value,
                           ["child_category_id", "link_group_id", "child_name",
                            "parent_name", "parent_category_id"])
        if group_rows:
            for row in group_rows:
                info.add_link(ItemLink(*row))
        else:
            for child_name, parent_name in frame_links:
                info.add_link(ItemLink(get_item_category(child_name), "1", child_name,
                                       parent_name, get_item_category(parent_name)))

        self._print(f"Parsed {len(info.categories)} categories, {len(info.items)} items, "
                    f"{len(info.links)} links")
        return info

    def _parse_category_frame(self, frame) -> CategoryDefinition:
        mandatory_code = _value(frame, DictItemKey.CATEGORY_MANDATORY_CODE.value)
        examples = [(case, detail) for case, detail in
                    _rows(frame, DictItemKey.CATEGORY_EXAMPLES_PREFIX.value, ["case", "?detail"])]
        return CategoryDefinition(
            _value(frame, DictItemKey.CATEGORY_ID.value),
            keys=_values(frame, DictItemKey.CATEGORY_KEY_NAME.value),
            description=_value(frame, DictItemKey.CATEGORY_DESCRIPTION.value),
            examples=examples,
            mandatory=mandatory_code.lower() == MandatoryCode.YES.value,
        )

    def _parse_item_frame(self, frame, primitive_codes: Dict[str, str]) -> Optional[ItemDefinition]:
        rows = _rows(frame, DictItemKey.ITEM_PREFIX.value, ["name", "category_id", "?mandatory_code"])
        if not rows:
            return None

        # A parent item's frame may also list its children; the frame item comes first
        name, category, mandatory_code = rows[0]
        for row in rows:
            if row[0].lower() == frame.name.lower():
                name, category, mandatory_code = row
                break

        definition = ItemDefinition(
            name,
            category or get_item_category(name),
            mandatory=mandatory_code.lower() == MandatoryCode.YES.value,
            type_code=_value(frame, DictItemKey.ITEM_TYPE_CODE.value),
            enumerations=_values(frame, DictItemKey.ITEM_ENUMERATION_VALUE.value),
            units=_value(frame, DictItemKey.ITEM_UNITS_CODE.value),
            description=_value(frame, DictItemKey.ITEM_DESCRIPTION.value),
            examples=[(case, detail) for case, detail in
                      _rows(frame, DictItemKey.ITEM_EXAMPLES_PREFIX.value, ["case", "?detail"])],
        )
        definition.primitive_code = primitive_codes.get(definition.type_code, "")
        for minimum, maximum in _rows(frame, DictItemKey.ITEM_RANGE_PREFIX.value,
                                      ["minimum", "maximum"]):
            definition.add_range(minimum, maximum)
        return definition

    def _inherit_types(self, info: DictionaryInfo, frame_links: List[Tuple[str, str]],
                       primitive_codes: Dict[str, str]) -> None:
        """Give untyped child items the type code of their parent item."""
        parents = {child: parent for child, parent in frame_links}
        for definition in info.items.values():
            seen = {definition.name}
            parent = parents.get(definition.name)
            while not definition.type_code and parent and parent not in seen:
                seen.add(parent)
                parent_definition = info.items.get(parent)
                if parent_definition is not None and parent_definition.type_code:
                    definition.type_code = parent_definition.type_code
                    definition.primitive_code = primitive_codes.get(definition.type_code, "")
                parent = parents.get(parent)
