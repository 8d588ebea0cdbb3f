import io
from pathlib import Path
from typing import IO, Iterable, List, Optional, Union

from .common import DictionaryMetadata, ParentChildGraph
from .defaults import ConstraintKind, FileOperation, KeyrefPolicy, XMLConstant
from .dictionary import DictionaryInfo, DictionaryParser
from .examples import CifExampleRenderer
from .models import DataBlock
from .parser import CifDataParser
from .pdbml_writer import ATOM_SITE_CATEGORY, PdbMlWriter
from .relations import ParentChild
from .schema import PdbMlSchema, make_full_schema_file_name, make_schema_file_name


class PDBMLHandler:
    """A class to generate PDBML schemas and documents from a DDL2 dictionary."""

    def __init__(
        self,
        dictionary: DictionaryMetadata,
        graph: Optional[ParentChildGraph] = None,
        ns: str = XMLConstant.PDBX_PREFIX.value,
        prefix: str = XMLConstant.SCHEMA_PREFIX.value,
        quiet: bool = False,
        log: Optional[IO] = None,
    ):
        """
        Initialize the handler.

        :param dictionary: Dictionary metadata
        :param graph: Parent/child graph; built from the dictionary links when
            the dictionary is a DictionaryInfo and no graph is given
        :param ns: Namespace prefix of the PDBML elements
        :param prefix: Schema file name prefix
        :param quiet: Suppress diagnostics
        :param log: Stream for diagnostics
        """
        if graph is None:
            if not isinstance(dictionary, DictionaryInfo):
                raise ValueError("A parent/child graph is required for this dictionary")
            graph = ParentChild.from_dictionary(dictionary)
        self.dictionary = dictionary
        self.graph = graph
        self.ns = ns
        self.prefix = prefix
        self.quiet = quiet
        self.log = log

    @classmethod
    def from_dictionary_file(cls, dict_path: Union[str, Path],
                             inapplicable_items: Optional[Iterable[str]] = None,
                             bad_child_relations: Optional[Iterable[str]] = None,
                             **kwargs) -> "PDBMLHandler":
        """
        Create a handler from a DDL2 dictionary file.

        :param dict_path: Path to the dictionary
        :param inapplicable_items: Items that may hold the inapplicable value
        :param bad_child_relations: Child items whose links are not enforced
        :param kwargs: Passed on to the constructor
        :return: The handler
        """
        parser = DictionaryParser(inapplicable_items, bad_child_relations,
                                  quiet=kwargs.get("quiet", False), log=kwargs.get("log"))
        return cls(parser.parse(dict_path), **kwargs)

    @property
    def namespace_uri(self) -> str:
        return make_full_schema_file_name(self.prefix)

    @property
    def schema_file_name(self) -> str:
        return make_schema_file_name(self.prefix, self.dictionary.get_version())

    def write_schema(
        self,
        file_obj: IO,
        policy: KeyrefPolicy,
        intrinsic_kind: ConstraintKind = ConstraintKind.KEY,
        combo_kind: ConstraintKind = ConstraintKind.UNIQUE,
        render_examples: bool = True,
        generation_date=None,
    ) -> None:
        """
        Write the XSD of the dictionary.

        :param file_obj: Text stream the schema is written to
        :param policy: Rule set deciding which links become keyrefs
        :param intrinsic_kind: Constraint used for the category keys
        :param combo_kind: Constraint used for other referenced keys
        :param render_examples: Render category examples as PDBML
        :param generation_date: Date written in the header comment
        """
        renderer = None
        if render_examples:
            renderer = CifExampleRenderer(self.dictionary, self.ns, quiet=self.quiet, log=self.log)
        schema = PdbMlSchema(
            file_obj, self.dictionary, self.graph, policy,
            ns=self.ns, prefix=self.prefix,
            intrinsic_kind=intrinsic_kind, combo_kind=combo_kind,
            example_renderer=renderer, generation_date=generation_date,
            quiet=self.quiet, log=self.log,
        )
        schema.convert()

    def schema_to_string(self, policy: KeyrefPolicy, **kwargs) -> str:
        stream = io.StringIO()
        self.write_schema(stream, policy, **kwargs)
        return stream.getvalue()

    def write_document(
        self,
        file_obj: IO,
        block: DataBlock,
        schema_location: Optional[str] = None,
        alternate_atom_site: bool = False,
    ) -> None:
        """
        Write one data block as a PDBML document.

        :param file_obj: Text stream the document is written to
        :param block: The data block to write
        :param schema_location: Optional schema location hint
        :param alternate_atom_site: Write atom_site in the fixed-width atom
            record layout
        """
        writer = PdbMlWriter(file_obj, self.dictionary, self.ns, quiet=self.quiet, log=self.log)
        writer.write_declaration()
        writer.write_datablock_opening_tag(self.namespace_uri, block.name, schema_location)
        for table in block:
            if alternate_atom_site and table.name == ATOM_SITE_CATEGORY:
                writer.write_alternate_atom_site_table(table)
            else:
                writer.write_table(table)
        writer.write_datablock_closing_tag()

    def document_to_string(self, block: DataBlock, **kwargs) -> str:
        stream = io.StringIO()
        self.write_document(stream, block, **kwargs)
        return stream.getvalue()

    def convert_file(self, cif_path: Union[str, Path], output_dir: Union[str, Path],
                     **kwargs) -> List[Path]:
        """
        Convert every data block of an mmCIF file into a PDBML document.

        Each block is written to ``<output_dir>/<block name>.xml``.

        :param cif_path: Path to the mmCIF file
        :param output_dir: Directory the documents are written to
        :param kwargs: Passed on to write_document
        :return: Paths of the written documents
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for block in CifDataParser().parse_file(cif_path):
            path = output_dir / f"{block.name}.xml"
            with open(path, FileOperation.WRITE.value, encoding=FileOperation.ENCODING.value) as f:
                self.write_document(f, block, **kwargs)
            written.append(path)
        return written
