"""
Parent/child relationship graph of a dictionary.

Links come as item pairs tagged with the parent category, the child category
and a link group id. All pairs sharing these three form one relationship:
the parent items, in link order, are the parent combo key and the child
items the child key.
"""

from typing import Dict, Iterable, List, Set, Tuple

from .common import ComboKey, ParentChildGraph
from .dictionary import DictionaryInfo, ItemLink


def _group_sort_key(link_group_id: str):
    if link_group_id.isdigit():
        return 0, int(link_group_id), ""
    return 1, 0, link_group_id


class ParentChild(ParentChildGraph):
    """ParentChildGraph built from item links."""

    def __init__(self, links: Iterable[ItemLink]):
        groups: Dict[Tuple[str, str, str], List[ItemLink]] = {}
        self._linked_items: Set[str] = set()
        for link in links:
            key = (link.parent_category, link.child_category, link.link_group_id)
            groups.setdefault(key, []).append(link)
            self._linked_items.add(link.parent_name)
            self._linked_items.add(link.child_name)

        self._combo_keys: Dict[str, List[ComboKey]] = {}
        # combo key -> child category -> child keys
        self._children: Dict[ComboKey, Dict[str, List[ComboKey]]] = {}

        ordered = sorted(groups, key=lambda k: (k[0], k[1], _group_sort_key(k[2])))
        for parent_category, child_category, group_id in ordered:
            group = groups[(parent_category, child_category, group_id)]
            parent_key = tuple(link.parent_name for link in group)
            child_key = tuple(link.child_name for link in group)

            combo_keys = self._combo_keys.setdefault(parent_category, [])
            if parent_key not in combo_keys:
                combo_keys.append(parent_key)

            child_keys = self._children.setdefault(parent_key, {}).setdefault(child_category, [])
            if child_key not in child_keys:
                child_keys.append(child_key)

    @classmethod
    def from_dictionary(cls, dictionary: DictionaryInfo) -> "ParentChild":
        return cls(dictionary.links)

    def get_combo_keys(self, category: str) -> List[ComboKey]:
        return list(self._combo_keys.get(category, []))

    def get_children_keys(self, combo_key: ComboKey) -> List[List[ComboKey]]:
        children = self._children.get(tuple(combo_key), {})
        return [list(children[child_category]) for child_category in sorted(children)]

    def is_linked_item(self, item: str) -> bool:
        return item in self._linked_items
