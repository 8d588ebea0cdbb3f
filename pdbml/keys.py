"""
Key filtering for the identity constraints of the generated schema.

The parent/child graph of a dictionary lists combo keys that child categories
refer to. Not every link can be enforced by an XSD keyref: items that may be
missing or inapplicable would make valid documents fail. The active
KeyrefPolicy decides which items are skipped, KeyFilter drops them from
parent and child keys, and ``plan`` turns the survivors into a numbered list
of constraints for one category.
"""

from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .common import ComboKey, DictionaryMetadata, ParentChildGraph
from .defaults import KeyrefPolicy


ChildKeys = List[List[ComboKey]]


class ComboConstraint:
    """
    A parent combo key that survived filtering.

    ``key_id`` 0 means the key coincides with the intrinsic category key;
    ``is_new`` tells whether a separate constraint must be declared for it.
    """

    def __init__(self, parent_index: int, key_id: int, items: ComboKey,
                 children: ChildKeys, is_new: bool):
        self.parent_index = parent_index
        self.key_id = key_id
        self.items = items
        self.children = children
        self.is_new = is_new

    @property
    def sorted_items(self) -> List[str]:
        return sorted(self.items)

    def __repr__(self):
        return (f"ComboConstraint(parent_index={self.parent_index}, key_id={self.key_id}, "
                f"items={self.items}, children={len(self.children)})")


class KeyFilter:
    """Applies a KeyrefPolicy to the combo keys of a parent/child graph."""

    def __init__(self, dictionary: DictionaryMetadata, graph: ParentChildGraph,
                 policy: KeyrefPolicy):
        """
        :param dictionary: Dictionary metadata
        :param graph: Parent/child graph of the dictionary
        :param policy: The rule set to apply
        """
        if not isinstance(policy, KeyrefPolicy):
            raise TypeError(f"policy must be a KeyrefPolicy, not {policy!r}")
        self.dictionary = dictionary
        self.graph = graph
        self.policy = policy

    # Item predicates

    def _is_undeterminable(self, item: str) -> bool:
        return not self.dictionary.is_item_mandatory(item) or self.dictionary.can_be_inapplicable(item)

    def is_skip_parent_item(self, item: str) -> bool:
        """Check if the item cannot take part in a parent key."""
        if self.policy == KeyrefPolicy.KEY_ITEMS_ONLY:
            return not self.dictionary.is_key_item(item)
        if self.policy == KeyrefPolicy.MANDATORY_KEY_SUPERSETS:
            return not self.dictionary.is_key_item(item) and self._is_undeterminable(item)
        if self.policy == KeyrefPolicy.MANDATORY_ITEMS:
            return self._is_undeterminable(item)
        return self.dictionary.can_be_inapplicable(item)

    def is_skip_child_item(self, item: str) -> bool:
        """Check if the item cannot take part in a child key."""
        if self.policy in (KeyrefPolicy.MANDATORY_ITEMS, KeyrefPolicy.DETERMINABLE_ITEMS):
            if self.dictionary.is_bad_child_relation(item):
                return True
        return self.is_skip_parent_item(item)

    def is_nillable(self, item: str) -> bool:
        """Check if a linked item is left out of keys and may be written as nil."""
        if not self.graph.is_linked_item(item):
            return False
        return self.is_skip_parent_item(item) or self.is_skip_child_item(item)

    def accepts_reference(self, category: str, parent_key: Sequence[str]) -> bool:
        """Check if keyrefs may point at a filtered parent key of a category."""
        intrinsic = set(self.dictionary.get_category_keys(category))
        if self.policy == KeyrefPolicy.KEY_ITEMS_ONLY:
            return bool(intrinsic) and set(parent_key) == intrinsic
        if self.policy == KeyrefPolicy.MANDATORY_KEY_SUPERSETS:
            return bool(intrinsic) and intrinsic.issubset(parent_key)
        return True

    # Filtering

    def filter_keys(self, parent_key: ComboKey,
                    children_keys: ChildKeys) -> Optional[Tuple[ComboKey, ChildKeys]]:
        """
        Drop skipped items from a parent key and its child keys.

        A parent key holding a skipped item is discarded and None returned.
        A position skipped in every child key is removed from the parent key
        and from all child keys; child keys still holding a skipped item are
        dropped, and so are child categories left without keys.

        :param parent_key: The parent combo key
        :param children_keys: Child keys per child category
        :return: The filtered parent key and child keys, or None
        """
        if any(self.is_skip_parent_item(item) for item in parent_key):
            return None

        skipped: List[List[Set[int]]] = [
            [{index for index, item in enumerate(child_key) if self.is_skip_child_item(item)}
             for child_key in child]
            for child in children_keys
        ]
        all_skip_sets = [skip_set for child in skipped for skip_set in child]

        removed: Set[int] = set()
        if all_skip_sets:
            for index in range(len(parent_key)):
                if all(index in skip_set for skip_set in all_skip_sets):
                    removed.add(index)

        kept_parent = tuple(item for index, item in enumerate(parent_key) if index not in removed)

        kept_children: ChildKeys = []
        for child, child_skips in zip(children_keys, skipped):
            kept_keys = []
            for child_key, skip_set in zip(child, child_skips):
                if skip_set - removed:
                    continue
                kept_key = tuple(item for index, item in enumerate(child_key) if index not in removed)
                if kept_key:
                    kept_keys.append(kept_key)
            if kept_keys:
                kept_children.append(kept_keys)

        return kept_parent, kept_children

    def plan(self, category: str) -> List[ComboConstraint]:
        """
        Number the combo keys of a category that can be enforced.

        Combo keys equal to the intrinsic key use id 0; other distinct item
        sets get sequential ids from 1 in combo key order.
        """
        intrinsic = frozenset(self.dictionary.get_category_keys(category))
        used_ids: Dict[FrozenSet[str], int] = {}
        next_id = 1
        constraints: List[ComboConstraint] = []

        for parent_index, combo_key in enumerate(self.graph.get_combo_keys(category)):
            filtered = self.filter_keys(combo_key, self.graph.get_children_keys(combo_key))
            if filtered is None:
                continue
            parent_key, children = filtered
            if not parent_key or not children:
                continue
            if not any(self.dictionary.is_item_defined(item) for item in parent_key):
                continue
            if not self.accepts_reference(category, parent_key):
                continue

            item_set = frozenset(parent_key)
            if intrinsic and item_set == intrinsic:
                key_id, is_new = 0, False
            elif item_set in used_ids:
                key_id, is_new = used_ids[item_set], False
            else:
                key_id, is_new = next_id, True
                used_ids[item_set] = next_id
                next_id += 1

            constraints.append(ComboConstraint(parent_index, key_id, parent_key, children, is_new))

        return constraints


def pair_keyref_fields(parent_key: Sequence[str], child_key: Sequence[str]) -> List[Tuple[str, str]]:
    """
    Pair parent and child items by position, ordered by parent item name.

    The sort is stable, so pairs sharing a parent item keep their order.
    """
    return sorted(zip(parent_key, child_key), key=lambda pair: pair[0])
