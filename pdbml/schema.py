"""
PDBML schema generator.

PdbMlSchema walks a DDL2 dictionary and its parent/child graph in a single
pass and writes the XSD describing PDBML documents: one complex type per
category, the datablock type aggregating all categories, and the datablock
element carrying the key, unique and keyref constraints derived from the
category keys and the parent/child links.
"""

import sys
from datetime import date
from typing import IO, List, Optional, Sequence, Union

from .common import (
    DictionaryMetadata,
    EmptyKeyrefError,
    ExampleRenderError,
    ExampleRenderer,
    ParentChildGraph,
)
from .defaults import (
    ConstraintKind,
    DataValue,
    FileOperation,
    KeyrefPolicy,
    TypeCode,
    TypeSuffix,
    XMLConstant,
    XSDTag,
)
from .examples import format_cif_description, format_cif_example
from .formatting import get_item_attribute, get_item_category, qualify_name, xsd_type
from .keys import ComboConstraint, KeyFilter, pair_keyref_fields
from .pdbml_writer import make_category_element_name
from .ranges import aggregate_inclusive_ranges, has_multiple_sub_ranges
from .xsd_writer import XsdWriter


MULTIPLE_RANGES_WARNING = (
    "WARNING: Detected multiple permitted value ranges for item {item}, which would "
    "participate in key/keyref relationship as a union. Some validators (Xerces) would "
    "flag all values of this item as key/keyref errors, while other validators would "
    "not. It is advised to remove this item from parent/child relationship, if value "
    "ranges are to be kept, or change value ranges to a single range if parent/child "
    "relationship is to be kept."
)


def make_category_type_name(category: str) -> str:
    """Name of the complex type of a category, e.g. ``atom_siteType``."""
    return f"{category}{TypeSuffix.TYPE.value}"


def make_schema_file_name(prefix: str, version: str = "") -> str:
    """Schema file name, ``<prefix>-v<version>.xsd`` or ``<prefix>.xsd``."""
    if version:
        return f"{prefix}{FileOperation.VERSION_SEPARATOR.value}{version}{FileOperation.XSD_EXT.value}"
    return f"{prefix}{FileOperation.XSD_EXT.value}"


def make_full_schema_file_name(prefix: str, version: str = "") -> str:
    return XMLConstant.SCHEMA_LOCATION_DIRECTORY.value + make_schema_file_name(prefix, version)


def make_constraint_name(category: str, kind: ConstraintKind, key_id: int) -> str:
    return f"{category}{kind.suffix}_{key_id}"


def make_keyref_name(category: str, parent_index: int, key_id: int,
                     child_index: int, child_key_index: int) -> str:
    return (f"{category}{TypeSuffix.KEYREF.value}_{parent_index}_{key_id}_"
            f"{child_index}_{child_key_index}")


def _is_empty(value: str) -> bool:
    return DataValue.is_null(value)


class PdbMlSchema:
    """Generates the PDBML XSD for a dictionary."""

    def __init__(
        self,
        stream: IO,
        dictionary: DictionaryMetadata,
        graph: ParentChildGraph,
        policy: KeyrefPolicy,
        ns: str = XMLConstant.PDBX_PREFIX.value,
        prefix: str = XMLConstant.SCHEMA_PREFIX.value,
        intrinsic_kind: ConstraintKind = ConstraintKind.KEY,
        combo_kind: ConstraintKind = ConstraintKind.UNIQUE,
        example_renderer: Optional[ExampleRenderer] = None,
        generation_date: Optional[Union[date, str]] = None,
        contact: str = XMLConstant.CONTACT.value,
        quiet: bool = False,
        log: Optional[IO] = None,
    ):
        """
        Initialize the generator.

        :param stream: Text stream the schema is written to
        :param dictionary: Dictionary metadata
        :param graph: Parent/child graph of the dictionary
        :param policy: Rule set deciding which links become keyrefs
        :param ns: Namespace prefix of the generated types
        :param prefix: Schema file name prefix, also naming the namespace
        :param intrinsic_kind: Constraint used for the category keys
        :param combo_kind: Constraint used for other referenced keys
        :param example_renderer: Renders category examples as PDBML; when
            None the CIF text is used as is
        :param generation_date: Date written in the header comment, today by
            default
        :param contact: Contact written in the header comment
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics, ``sys.stderr`` by default
        """
        self.dictionary = dictionary
        self.graph = graph
        self.ns = ns
        self.prefix = prefix
        self.intrinsic_kind = intrinsic_kind
        self.combo_kind = combo_kind
        self.example_renderer = example_renderer
        self.generation_date = generation_date
        self.contact = contact
        self.quiet = quiet
        self.log = log
        self.key_filter = KeyFilter(dictionary, graph, policy)
        self.writer = XsdWriter(stream, ns, quiet, log)

    @property
    def namespace_uri(self) -> str:
        return make_full_schema_file_name(self.prefix)

    def _log(self, message: str) -> None:
        if not self.quiet:
            print(message, file=self.log or sys.stderr)

    def convert(self) -> None:
        """Write the complete schema document."""
        version = self.dictionary.get_version() or XMLConstant.DEFAULT_DICTIONARY_VERSION.value

        self.writer.write_declaration()
        self.writer.write_new_line()
        self._write_schema_comment(version)
        self.writer.write_new_line()
        self.writer.write_schema_opening_tag(self.namespace_uri)
        self.writer.write_new_line()

        categories = sorted(self.dictionary.get_category_names())
        for category in categories:
            self._write_category_type(category)
        self._write_datablock_type(categories)
        self._write_datablock_element(categories)

        self.writer.write_schema_closing_tag()

    def _write_schema_comment(self, version: str) -> None:
        generated = self.generation_date or date.today()
        if isinstance(generated, date):
            generated = generated.strftime("%Y-%m-%d")
        self.writer.write_comment(f"XSD type schema generated on {generated}")
        self.writer.write_comment(
            f"Schema file: {make_full_schema_file_name(self.prefix, version)}")
        self.writer.write_comment(f"Please direct questions or comments to {self.contact}")

    # Category types

    def _write_category_type(self, category: str) -> None:
        writer = self.writer
        writer.open_complex_type(make_category_type_name(category))
        self._write_category_documentation(category)

        writer.open_sequence()
        writer.open_element(qualify_name(category), min_occurs="0", max_occurs="unbounded")
        writer.open_complex_type()

        keys = sorted(self.dictionary.get_category_keys(category))
        non_key_items = [item for item in sorted(self.dictionary.get_item_names(category))
                         if item not in keys]

        if non_key_items:
            writer.open_all()
            for item in non_key_items:
                self._write_item(item, is_key=False)
            writer.close_all()

        for key in keys:
            if key == DataValue.UNKNOWN.value:
                continue
            if not self.dictionary.is_item_defined(key):
                self._log(f'Warning: Skipping undefined key item "{key}" of category "{category}"')
                continue
            self._write_item(key, is_key=True)

        writer.close_complex_type()
        writer.close_element()
        writer.close_sequence()
        writer.close_complex_type()
        writer.write_new_line()

    def _render_example(self, case: str) -> str:
        if self.example_renderer is None:
            return format_cif_example(case)
        return self.example_renderer.render(case)

    def _write_category_documentation(self, category: str) -> None:
        parts = []
        description = format_cif_description(self.dictionary.get_category_description(category))
        if not _is_empty(description):
            parts.append(description)

        for case, detail in self.dictionary.get_category_examples(category):
            if not _is_empty(detail):
                parts.append(detail)
            if _is_empty(case):
                continue
            try:
                rendered = self._render_example(case)
            except ExampleRenderError:
                self._log(f'Skipping conversion to XML of the bad CIF segment "{case}"')
                continue
            if not _is_empty(rendered):
                parts.append(rendered)

        self.writer.write_documentation("\n".join(parts))

    def _write_item_documentation(self, item: str) -> None:
        parts = []
        description = format_cif_description(self.dictionary.get_item_description(item))
        if not _is_empty(description):
            parts.append(description)
        for case, detail in self.dictionary.get_item_examples(item):
            if not _is_empty(detail):
                parts.append(detail)
            if not _is_empty(case):
                parts.append(case)
        self.writer.write_documentation("\n".join(parts))

    # Items

    def _has_range(self, item: str) -> bool:
        minimums = self.dictionary.get_range_minimums(item)
        maximums = self.dictionary.get_range_maximums(item)
        return any(not (_is_empty(minimum) and _is_empty(maximum))
                   for minimum, maximum in zip(minimums, maximums))

    def _is_simple(self, item: str, is_key: bool) -> bool:
        if self.dictionary.is_simple_data_type(item):
            return True
        if self.dictionary.get_enumerations(item) or self._has_range(item):
            return False
        # Attributes cannot carry the units extension
        return is_key or not self.dictionary.get_units(item)

    def _write_item(self, item: str, is_key: bool) -> None:
        """
        Write a key item as a required attribute or any other item as an
        element of the ``all`` group.
        """
        writer = self.writer
        name = qualify_name(get_item_attribute(item))
        type_code = self.dictionary.get_type_code(item)
        simple = self._is_simple(item, is_key)
        type_name = xsd_type(type_code) if simple else ""

        if is_key:
            writer.open_attribute(name, type_name, use="required")
        else:
            mandatory = self.dictionary.is_item_mandatory(item)
            writer.open_element(name, type_name, min_occurs="1" if mandatory else "0",
                                max_occurs="1", nillable=self.key_filter.is_nillable(item))

        self._write_item_documentation(item)
        if not simple:
            self._write_data_type(item, type_code)

        if is_key:
            writer.close_attribute()
        else:
            writer.close_element()

    def _write_data_type(self, item: str, type_code: TypeCode) -> None:
        base = xsd_type(type_code)
        enumerations = self.dictionary.get_enumerations(item)

        if enumerations:
            self.writer.open_simple_type()
            self.writer.open_restriction(base)
            for value in enumerations:
                self.writer.write_enumeration(value)
            self.writer.close_restriction()
            self.writer.close_simple_type()
        elif self._has_range(item):
            self._write_ranges(item, base)
        elif self.dictionary.get_units(item):
            self._write_units(self.dictionary.get_units(item), base)

    def _write_ranges(self, item: str, base: str) -> None:
        writer = self.writer
        minimums = self.dictionary.get_range_minimums(item)
        maximums = self.dictionary.get_range_maximums(item)
        aggregated_minimums, aggregated_maximums = aggregate_inclusive_ranges(minimums, maximums)

        writer.open_simple_type()
        if len(aggregated_minimums) == 1:
            minimum, maximum = aggregated_minimums[0], aggregated_maximums[0]
            writer.open_restriction(base)
            if not _is_empty(minimum):
                writer.write_facet(XSDTag.MIN_INCLUSIVE, minimum)
            if not _is_empty(maximum):
                writer.write_facet(XSDTag.MAX_INCLUSIVE, maximum)
            writer.close_restriction()
        else:
            writer.open_union()
            for minimum, maximum in zip(minimums, maximums):
                if _is_empty(minimum) and _is_empty(maximum):
                    continue
                if minimum.lower() == maximum.lower():
                    min_facet, max_facet = XSDTag.MIN_INCLUSIVE, XSDTag.MAX_INCLUSIVE
                else:
                    min_facet, max_facet = XSDTag.MIN_EXCLUSIVE, XSDTag.MAX_EXCLUSIVE
                writer.open_simple_type()
                writer.open_restriction(base)
                if not _is_empty(minimum):
                    writer.write_facet(min_facet, minimum)
                if not _is_empty(maximum):
                    writer.write_facet(max_facet, maximum)
                writer.close_restriction()
                writer.close_simple_type()
            writer.close_union()
        writer.close_simple_type()

    def _write_units(self, units: str, base: str) -> None:
        writer = self.writer
        writer.open_complex_type()
        writer.open_simple_content()
        writer.open_extension(base)
        writer.open_attribute("units", xsd_type(TypeCode.STRING), use="optional",
                              fixed=units, empty=True)
        writer.close_extension()
        writer.close_simple_content()
        writer.close_complex_type()

    # Datablock

    def _write_datablock_type(self, categories: Sequence[str]) -> None:
        writer = self.writer
        writer.open_complex_type(make_category_type_name(XMLConstant.DATABLOCK.value))
        writer.open_all()
        for category in categories:
            writer.open_element(
                qualify_name(make_category_element_name(category)),
                writer.qualify_type(make_category_type_name(category)),
                min_occurs="0", max_occurs="1", empty=True,
            )
        writer.close_all()
        writer.open_attribute(XMLConstant.DATABLOCK_NAME.value, xsd_type(TypeCode.STRING),
                              use="optional", empty=True)
        writer.close_complex_type()

    def _write_datablock_element(self, categories: Sequence[str]) -> None:
        writer = self.writer
        writer.open_element(
            XMLConstant.DATABLOCK.value,
            writer.qualify_type(make_category_type_name(XMLConstant.DATABLOCK.value)),
        )
        for category in categories:
            self._write_category_constraints(category)
        writer.close_element()

    def _write_category_constraints(self, category: str) -> None:
        keys = sorted(self.dictionary.get_category_keys(category))
        if keys:
            self._write_constraint(category, self.intrinsic_kind, 0, keys)

        constraints = self.key_filter.plan(category)
        for constraint in constraints:
            if constraint.is_new:
                self._write_constraint(category, self.combo_kind, constraint.key_id,
                                       constraint.sorted_items)
        for constraint in constraints:
            self._write_keyrefs(category, constraint)

    def _selector_xpath(self, category: str) -> str:
        return "/".join([
            qualify_name(make_category_element_name(category), self.ns, replace_slash=False),
            qualify_name(category, self.ns, replace_slash=False),
        ])

    def _field_xpath(self, item: str) -> str:
        attribute = get_item_attribute(item)
        if self.dictionary.is_key_item(item):
            return "@" + qualify_name(attribute, replace_slash=False)
        return qualify_name(attribute, self.ns, replace_slash=False)

    def _defined_items(self, items: Sequence[str], constraint_name: str) -> List[str]:
        defined = []
        for item in items:
            if self.dictionary.is_item_defined(item):
                defined.append(item)
            else:
                self._log(f'Warning: Skipping undefined item "{item}" in constraint "{constraint_name}"')
        return defined

    def _write_constraint(self, category: str, kind: ConstraintKind, key_id: int,
                          items: Sequence[str]) -> bool:
        """Write a key or unique constraint; False if none of the items is defined."""
        if not any(self.dictionary.is_item_defined(item) for item in items):
            return False

        name = make_constraint_name(category, kind, key_id)
        tag = XSDTag.KEY if kind == ConstraintKind.KEY else XSDTag.UNIQUE
        if kind == ConstraintKind.KEY:
            self.writer.open_key(name)
        else:
            self.writer.open_unique(name)
        self.writer.write_selector(self._selector_xpath(category))
        for item in self._defined_items(items, name):
            self.writer.write_field(self._field_xpath(item))
        self.writer.close_constraint(tag)
        return True

    def _warn_multiple_ranges(self, items: Sequence[str]) -> None:
        for item in items:
            if has_multiple_sub_ranges(self.dictionary.get_range_minimums(item),
                                       self.dictionary.get_range_maximums(item)):
                self._log(MULTIPLE_RANGES_WARNING.format(item=item))

    def _write_keyrefs(self, category: str, constraint: ComboConstraint) -> None:
        kind = self.intrinsic_kind if constraint.key_id == 0 else self.combo_kind
        refer = self.writer.qualify_type(make_constraint_name(category, kind, constraint.key_id))

        self._warn_multiple_ranges(constraint.items)
        for child_index, child_keys in enumerate(constraint.children):
            child_category = get_item_category(child_keys[0][0])
            for child_key_index, child_key in enumerate(child_keys):
                self._warn_multiple_ranges(child_key)
                name = make_keyref_name(category, constraint.parent_index, constraint.key_id,
                                        child_index, child_key_index)
                fields = [child for _, child in pair_keyref_fields(constraint.items, child_key)]
                self._write_keyref(name, refer, child_category, fields)

    def _write_keyref(self, name: str, refer: str, child_category: str,
                      child_items: Sequence[str]) -> None:
        defined = self._defined_items(child_items, name)
        if not defined:
            raise EmptyKeyrefError(f'No child keys for keyref "{name}"')

        self.writer.open_keyref(name, refer)
        self.writer.write_selector(self._selector_xpath(child_category))
        for item in defined:
            self.writer.write_field(self._field_xpath(item))
        self.writer.close_constraint(XSDTag.KEYREF)
