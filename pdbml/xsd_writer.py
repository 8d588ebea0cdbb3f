"""
XSD vocabulary on top of XmlWriter.

Every XML Schema construct the schema generator needs has an opening/closing
pair or a single empty-tag writer here. Tags are qualified with the ``xsd``
prefix; references to generated types use the schema namespace prefix.
"""

from typing import IO, Optional, Sequence, Tuple

from .defaults import XMLConstant, XSDAttribute, XSDTag
from .formatting import qualify_name
from .writer import XmlWriter


Attributes = Sequence[Tuple[XSDAttribute, str]]


class XsdWriter(XmlWriter):
    """A class to write XML Schema documents."""

    def __init__(self, stream: IO, schema_ns: str = XMLConstant.PDBX_PREFIX.value,
                 quiet: bool = False, log: Optional[IO] = None):
        """
        :param stream: Text stream the schema is written to
        :param schema_ns: Namespace prefix of the generated types
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics
        """
        super().__init__(stream, XMLConstant.XSD_PREFIX.value, quiet, log)
        self.schema_ns = schema_ns

    def qualify_type(self, name: str) -> str:
        """Qualify a generated type or constraint name with the schema prefix."""
        return qualify_name(name, self.schema_ns)

    # Generic

    def _write_attributes(self, attributes: Optional[Attributes]) -> None:
        for name, value in attributes or ():
            self.write_attribute(name.value, value)

    def open_tag(self, tag: XSDTag, attributes: Optional[Attributes] = None) -> None:
        self.write_qualified_opening_tag(tag.value)
        self._write_attributes(attributes)
        self.write_closing_bracket()
        self.increment_indent()

    def close_tag(self, tag: XSDTag) -> None:
        self.decrement_indent()
        self.write_qualified_closing_tag(tag.value)

    def write_empty_tag(self, tag: XSDTag, attributes: Optional[Attributes] = None) -> None:
        self.write_qualified_opening_tag(tag.value)
        self._write_attributes(attributes)
        self.write_empty_tag_end()

    # Schema root

    def write_schema_opening_tag(self, namespace_uri: str) -> None:
        self.write_qualified_opening_tag(XSDTag.SCHEMA.value)
        self.write_namespace_attribute(XMLConstant.XSD_PREFIX.value, XMLConstant.XSD_URI.value)
        self.write_namespace_attribute(self.schema_ns, namespace_uri)
        self._write_attributes([
            (XSDAttribute.TARGET_NAMESPACE, namespace_uri),
            (XSDAttribute.ELEMENT_FORM_DEFAULT, "qualified"),
            (XSDAttribute.ATTRIBUTE_FORM_DEFAULT, "unqualified"),
        ])
        self.write_closing_bracket()
        self.increment_indent()

    def write_schema_closing_tag(self) -> None:
        self.close_tag(XSDTag.SCHEMA)

    # Structure

    def open_complex_type(self, name: str = "") -> None:
        self.open_tag(XSDTag.COMPLEX_TYPE, [(XSDAttribute.NAME, name)] if name else None)

    def close_complex_type(self) -> None:
        self.close_tag(XSDTag.COMPLEX_TYPE)

    def open_sequence(self) -> None:
        self.open_tag(XSDTag.SEQUENCE)

    def close_sequence(self) -> None:
        self.close_tag(XSDTag.SEQUENCE)

    def open_all(self) -> None:
        self.open_tag(XSDTag.ALL)

    def close_all(self) -> None:
        self.close_tag(XSDTag.ALL)

    def write_documentation(self, text: str, lang: str = "en") -> None:
        """Write an annotation holding one documentation block."""
        self.open_tag(XSDTag.ANNOTATION)
        self.write_qualified_opening_tag(XSDTag.DOCUMENTATION.value)
        self.write_lang_attribute(lang)
        self.write_closing_bracket()
        self.write_text(text)
        self.write_new_line()
        self.write_qualified_closing_tag(XSDTag.DOCUMENTATION.value)
        self.close_tag(XSDTag.ANNOTATION)

    @staticmethod
    def _occurrence_attributes(type_name: str, min_occurs: Optional[str],
                               max_occurs: Optional[str], nillable: bool) -> Attributes:
        attributes = []
        if type_name:
            attributes.append((XSDAttribute.TYPE, type_name))
        if min_occurs is not None:
            attributes.append((XSDAttribute.MIN_OCCURS, min_occurs))
        if max_occurs is not None:
            attributes.append((XSDAttribute.MAX_OCCURS, max_occurs))
        if nillable:
            attributes.append((XSDAttribute.NILLABLE, "true"))
        return attributes

    def open_element(self, name: str, type_name: str = "", min_occurs: Optional[str] = None,
                     max_occurs: Optional[str] = None, nillable: bool = False,
                     empty: bool = False) -> None:
        """
        Write an element declaration.

        :param name: Element name
        :param type_name: Optional ``type`` attribute
        :param min_occurs: Optional ``minOccurs`` attribute
        :param max_occurs: Optional ``maxOccurs`` attribute
        :param nillable: Whether to write ``nillable="true"``
        :param empty: Write a self-closing tag instead of opening one
        """
        attributes = [(XSDAttribute.NAME, name)]
        attributes.extend(self._occurrence_attributes(type_name, min_occurs, max_occurs, nillable))
        if empty:
            self.write_empty_tag(XSDTag.ELEMENT, attributes)
        else:
            self.open_tag(XSDTag.ELEMENT, attributes)

    def close_element(self) -> None:
        self.close_tag(XSDTag.ELEMENT)

    def open_attribute(self, name: str, type_name: str = "", use: str = "",
                       fixed: Optional[str] = None, empty: bool = False) -> None:
        attributes = []
        if fixed is not None:
            attributes.append((XSDAttribute.FIXED, fixed))
        attributes.append((XSDAttribute.NAME, name))
        if type_name:
            attributes.append((XSDAttribute.TYPE, type_name))
        if use:
            attributes.append((XSDAttribute.USE, use))
        if empty:
            self.write_empty_tag(XSDTag.ATTRIBUTE, attributes)
        else:
            self.open_tag(XSDTag.ATTRIBUTE, attributes)

    def close_attribute(self) -> None:
        self.close_tag(XSDTag.ATTRIBUTE)

    # Simple types

    def open_simple_type(self) -> None:
        self.open_tag(XSDTag.SIMPLE_TYPE)

    def close_simple_type(self) -> None:
        self.close_tag(XSDTag.SIMPLE_TYPE)

    def open_restriction(self, base: str) -> None:
        self.open_tag(XSDTag.RESTRICTION, [(XSDAttribute.BASE, base)])

    def close_restriction(self) -> None:
        self.close_tag(XSDTag.RESTRICTION)

    def write_enumeration(self, value: str) -> None:
        self.write_empty_tag(XSDTag.ENUMERATION, [(XSDAttribute.VALUE, value)])

    def write_facet(self, facet: XSDTag, value: str) -> None:
        """Write one of the min/max inclusive/exclusive facets."""
        self.write_empty_tag(facet, [(XSDAttribute.VALUE, value)])

    def open_union(self) -> None:
        self.open_tag(XSDTag.UNION)

    def close_union(self) -> None:
        self.close_tag(XSDTag.UNION)

    def open_simple_content(self) -> None:
        self.open_tag(XSDTag.SIMPLE_CONTENT)

    def close_simple_content(self) -> None:
        self.close_tag(XSDTag.SIMPLE_CONTENT)

    def open_extension(self, base: str) -> None:
        self.open_tag(XSDTag.EXTENSION, [(XSDAttribute.BASE, base)])

    def close_extension(self) -> None:
        self.close_tag(XSDTag.EXTENSION)

    # Identity constraints

    def open_key(self, name: str) -> None:
        self.open_tag(XSDTag.KEY, [(XSDAttribute.NAME, name)])

    def open_unique(self, name: str) -> None:
        self.open_tag(XSDTag.UNIQUE, [(XSDAttribute.NAME, name)])

    def open_keyref(self, name: str, refer: str) -> None:
        self.open_tag(XSDTag.KEYREF, [(XSDAttribute.NAME, name), (XSDAttribute.REFER, refer)])

    def close_constraint(self, tag: XSDTag) -> None:
        self.close_tag(tag)

    def write_selector(self, xpath: str) -> None:
        self.write_empty_tag(XSDTag.SELECTOR, [(XSDAttribute.XPATH, xpath)])

    def write_field(self, xpath: str) -> None:
        self.write_empty_tag(XSDTag.FIELD, [(XSDAttribute.XPATH, xpath)])
