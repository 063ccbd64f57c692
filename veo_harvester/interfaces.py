"""
Abstract interfaces and base classes for the VEO Harvester system.

This module defines the contracts that all system components must implement
to ensure consistent behavior and enable dependency injection.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Optional, TextIO, Tuple, Union

from .models import FieldSpecList, HarvestConfig, ProcessingResult


class ElementConsumerInterface(ABC):
    """
    Receiver of streaming parser events.

    The protocol has two phases per element: the parser asks for interest when
    an element starts, and delivers the element's value when it ends, but only
    for elements the consumer declared interest in.
    """

    @abstractmethod
    def on_element_start(self, element_path: str, attributes: List[Tuple[str, str]]) -> bool:
        """
        Handle the start of an element.

        Args:
            element_path: Slash-delimited qualified names from the document root
            attributes: Ordered (qualified name, value) pairs of the element

        Returns:
            True to request the element's value at element end
        """
        pass

    @abstractmethod
    def on_element_end(self, element_path: str, value: Optional[str]) -> None:
        """
        Handle the end of an element the consumer declared interest in.

        Args:
            element_path: Slash-delimited qualified names from the document root
            value: Text content of the element, or None if it has none
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Discard anything harvested and prepare for a new document."""
        pass

    @abstractmethod
    def set_document_identity(self, file_name: str, file_path: str) -> None:
        """
        Record the identity of the document about to be parsed.

        Args:
            file_name: Final component of the document's path
            file_path: Full (absolute) path of the document
        """
        pass


class DocumentParserInterface(ABC):
    """Abstract interface for streaming document parsers."""

    @abstractmethod
    def parse(self, document_path: Union[str, Path]) -> None:
        """
        Stream a document file, reporting its elements to the consumer.

        Raises:
            DocumentError: If the document cannot be read or is not well-formed
        """
        pass

    @abstractmethod
    def parse_string(self, content: Union[str, bytes], source: str = "<string>") -> None:
        """
        Stream an in-memory document, reporting its elements to the consumer.

        Raises:
            DocumentError: If the document is not well-formed
        """
        pass


class RecordCodecInterface(ABC):
    """
    Abstract interface for output encodings.

    A codec writes a preamble once per output file, one record per document
    (each followed by record_terminator, separated by record_separator) and a
    postamble once per output file.
    """

    @abstractmethod
    def preamble(self, writer: TextIO, field_specs: Optional[FieldSpecList] = None) -> None:
        """Write whatever precedes the first record of an output file."""
        pass

    @abstractmethod
    def emit(self, writer: TextIO, harvest: Any) -> None:
        """
        Write one document's record.

        Args:
            writer: Text output
            harvest: HarvestRecord (flat form) or HarvestTree (nested form)
        """
        pass

    @abstractmethod
    def postamble(self, writer: TextIO) -> None:
        """Write whatever follows the last record of an output file."""
        pass


class ConfigurationManagerInterface(ABC):
    """Abstract interface for configuration management components."""

    @abstractmethod
    def load_field_specs(self, control_file: Optional[Union[str, Path]] = None) -> FieldSpecList:
        """
        Load the field list from a control file.

        Args:
            control_file: Path to the control file

        Returns:
            Loaded field list
        """
        pass

    @abstractmethod
    def get_harvest_config(self, **overrides) -> HarvestConfig:
        """
        Get the run configuration.

        Returns:
            Harvest configuration object
        """
        pass


class BatchProcessorInterface(ABC):
    """
    Abstract interface for document processing strategies.

    Allows:
    - Sequential processing via HarvestProcessor
    - Mock processors for unit testing
    """

    @abstractmethod
    def process(self, inputs: Iterable[Union[str, Path]]) -> ProcessingResult:
        """
        Harvest every document named by inputs (files or directories).

        Args:
            inputs: Files and directories to process, in order

        Returns:
            ProcessingResult with counts and diagnostics
        """
        pass
