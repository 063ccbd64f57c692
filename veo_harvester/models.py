"""
Core data models for the VEO Harvester system.

This module defines the primary data structures used throughout the system:
the configured fields to harvest, the per-document record the harvested
values are accumulated in, and the run configuration.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .config.processing_defaults import ProcessingDefaults
from .exceptions import ConfigurationError


class OutputFormat(Enum):
    """Supported output encodings."""
    XML = "xml"
    JSON = "json"
    CSV = "csv"
    TSV = "tsv"

    @property
    def file_extension(self) -> str:
        """File extension (without the dot) used for per-document output files."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "OutputFormat":
        """
        Look up a format by its (case-insensitive) name.

        Raises:
            ConfigurationError: If the name is not a supported format
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            supported = ", ".join(fmt.value for fmt in cls)
            raise ConfigurationError(f"Unsupported output format '{name}' (expected one of {supported})")

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional["OutputFormat"]:
        """Infer the format from a file name extension, or None if it cannot be inferred."""
        suffix = Path(file_name).suffix.lower().lstrip(".")
        for fmt in cls:
            if fmt.value == suffix:
                return fmt
        return None


@dataclass
class FieldSpec:
    """
    One configured field: where to find it in a VEO and how to label it.

    Attributes:
        paths: Equivalent element paths (e.g. the same title under a File VEO
               and under a Record VEO). Matching is exact string equality.
        default: Value to output when nothing is harvested for a document
        tag: Name of the field in the output. Defaults to the final segment
             of the first path.
    """
    paths: List[str]
    default: Optional[str] = None
    tag: Optional[str] = None

    def __post_init__(self):
        """Validate the paths and derive the tag."""
        if isinstance(self.paths, str):
            self.paths = [self.paths]
        if not self.paths:
            raise ConfigurationError("A field must have at least one element path")
        for path in self.paths:
            if not path:
                raise ConfigurationError("Element path cannot be empty")
        self.paths = tuple(self.paths)

        if not self.tag:
            first = self.paths[0]
            self.tag = first[first.rfind("/") + 1:]
            if not self.tag:
                raise ConfigurationError(f"Couldn't find final tag name in '{first}'. Does it end in a '/'?")

    def matches(self, element_path: str) -> bool:
        """Is the given element path one of the paths of this field?"""
        return element_path in self.paths

    @property
    def is_document_identity(self) -> bool:
        """True for the two reserved fields populated with the VEO's file name or path."""
        return self.tag.lower() in ("filename", "filepath")


class FieldSpecList:
    """
    Ordered collection of FieldSpec, built once from the control file.

    The order is the configuration order and governs the column/property
    order of every output format. The list holds no per-document state; call
    new_record() to get an accumulator for one document.
    """

    def __init__(self, specs: Iterable[FieldSpec]):
        self._specs: Tuple[FieldSpec, ...] = tuple(specs)
        self._path_index: Dict[str, List[int]] = {}
        for position, spec in enumerate(self._specs):
            for path in spec.paths:
                positions = self._path_index.setdefault(path, [])
                if position not in positions:
                    positions.append(position)

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs)

    def __getitem__(self, index: int) -> FieldSpec:
        return self._specs[index]

    def __repr__(self) -> str:
        return f"FieldSpecList({list(self.tags)!r})"

    @property
    def tags(self) -> List[str]:
        return [spec.tag for spec in self._specs]

    def matching_positions(self, element_path: str) -> List[int]:
        """Positions (list order) of every field whose path set contains element_path."""
        return self._path_index.get(element_path, [])

    def matching(self, element_path: str) -> List[FieldSpec]:
        return [self._specs[i] for i in self.matching_positions(element_path)]

    def new_record(self) -> "HarvestRecord":
        """Create an empty per-document record bound to this list."""
        return HarvestRecord(self)


@dataclass
class FieldHarvest:
    """Values and attributes harvested for one field from the current document."""
    spec: FieldSpec
    values: List[str] = field(default_factory=list)
    attributes: List[str] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return self.spec.tag

    @property
    def default(self) -> Optional[str]:
        return self.spec.default

    def clear(self) -> None:
        self.values.clear()
        self.attributes.clear()


class HarvestRecord:
    """
    Per-document accumulator: one FieldHarvest per configured field, in list order.

    A record is owned by the processing of exactly one document at a time,
    so several documents can be harvested against the same FieldSpecList.
    """

    def __init__(self, field_specs: FieldSpecList):
        self.field_specs = field_specs
        self.fields: List[FieldHarvest] = [FieldHarvest(spec) for spec in field_specs]
        self.document_name: Optional[str] = None
        self.document_path: Optional[str] = None

    def __iter__(self) -> Iterator[FieldHarvest]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def matching(self, element_path: str) -> List[FieldHarvest]:
        return [self.fields[i] for i in self.field_specs.matching_positions(element_path)]

    def get(self, tag: str) -> Optional[FieldHarvest]:
        """First field with the given tag, or None."""
        for harvest in self.fields:
            if harvest.tag == tag:
                return harvest
        return None

    def clear(self) -> None:
        """Reset every field for another document."""
        for harvest in self.fields:
            harvest.clear()
        self.document_name = None
        self.document_path = None

    def set_document_identity(self, file_name: str, file_path: str) -> None:
        """Populate the reserved 'filename' and 'filepath' fields for the document about to be parsed."""
        self.document_name = file_name
        self.document_path = file_path
        for harvest in self.fields:
            if harvest.spec.is_document_identity:
                harvest.values.append(file_path if harvest.tag.lower() == "filepath" else file_name)


@dataclass
class HarvestConfig:
    """
    Configuration for one harvesting run.

    Attributes:
        output_format: Encoding of the output records
        output_dir: Directory receiving per-document output files (and relative output_file)
        output_file: Single file receiving every record (grouped output)
        to_stdout: Write every record to standard output (grouped output)
        nested: Capture whole subtrees under the configured paths instead of leaf values
        chatty: Report at INFO level when each document is started
        file_extensions: Suffixes of files treated as VEOs when walking directories
    """
    output_format: OutputFormat
    output_dir: Path = field(default_factory=lambda: Path("."))
    output_file: Optional[Path] = None
    to_stdout: bool = False
    nested: bool = False
    chatty: bool = False
    file_extensions: Tuple[str, ...] = ProcessingDefaults.FILE_EXTENSIONS

    def __post_init__(self):
        """Validate run configuration."""
        if isinstance(self.output_format, str):
            self.output_format = OutputFormat.from_name(self.output_format)
        self.output_dir = Path(self.output_dir)
        if self.output_file is not None:
            self.output_file = Path(self.output_file)
        if self.to_stdout and self.output_file is not None:
            raise ConfigurationError("Requested output to standard output and a specific file")
        if not self.file_extensions:
            raise ConfigurationError("At least one input file extension must be specified")
        self.file_extensions = tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}"
                                     for ext in self.file_extensions)

    @property
    def grouped_output(self) -> bool:
        """True if every record goes to one output sink."""
        return self.to_stdout or self.output_file is not None

    def resolved_output_file(self) -> Optional[Path]:
        """The grouped output file, resolved against output_dir when relative."""
        if self.output_file is None:
            return None
        if self.output_file.is_absolute():
            return self.output_file
        return self.output_dir / self.output_file


@dataclass
class ProcessingResult:
    """
    Results from a harvesting run.

    Attributes:
        documents_processed: Total number of documents attempted
        documents_successful: Number of documents harvested and written
        documents_failed: Number of documents abandoned
        files_skipped: Files ignored because they are not VEOs
        processing_time_seconds: Total processing time
        errors: One-line diagnostics for abandoned documents
    """
    documents_processed: int = 0
    documents_successful: int = 0
    documents_failed: int = 0
    files_skipped: int = 0
    processing_time_seconds: float = 0.0
    errors: List[str] = None

    def __post_init__(self):
        """Initialize default values for mutable fields."""
        if self.errors is None:
            self.errors = []

    @property
    def success_rate(self) -> float:
        """Calculate the success rate as a percentage."""
        if self.documents_processed == 0:
            return 0.0
        return (self.documents_successful / self.documents_processed) * 100.0
