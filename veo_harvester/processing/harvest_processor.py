"""
Harvest Processor - single-threaded harvesting of a batch of VEOs.

Walks the named files and directories, harvests each VEO with a fresh
collector, and writes the records either to one grouped output (a file or
standard output) or to one output file per VEO in the output directory.
"""

import logging
import time

from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .output_sink import OutputSink, open_file_sink, open_stdout_sink
from ..codecs import get_codec
from ..exceptions import DocumentError, OutputError
from ..harvesting.collector import Collector, TreeCollector
from ..interfaces import BatchProcessorInterface
from ..models import FieldSpecList, HarvestConfig, ProcessingResult
from ..parsing.veo_parser import VEOParser


class HarvestProcessor(BatchProcessorInterface):
    """
    Sequential VEO harvester.

    Documents are processed one at a time in submission order (directories
    are walked recursively in sorted order). A document that cannot be parsed
    or written is abandoned with a one-line warning and processing continues;
    failure of the grouped output is fatal and raises OutputError.
    """

    def __init__(self, field_specs: FieldSpecList, config: HarvestConfig):
        """
        Initialize the processor.

        Args:
            field_specs: Fields to harvest from every document
            config: Run configuration (format, destination, nested/chatty flags)
        """
        self.logger = logging.getLogger(__name__)
        self.field_specs = field_specs
        self.config = config
        self.codec = get_codec(config.output_format)

        # Performance tracking
        self.elements_seen = 0
        self.elements_harvested = 0

        self.logger.debug(f"HarvestProcessor initialized ({config.output_format.name}, "
                          f"{'nested' if config.nested else 'flat'}, {len(field_specs)} fields)")

    def process(self, inputs: Iterable[Union[str, Path]]) -> ProcessingResult:
        """
        Harvest every VEO named by inputs.

        Raises:
            OutputError: If the grouped output cannot be opened or written
        """
        start_time = time.time()
        result = ProcessingResult()

        if self.config.grouped_output:
            with self._open_grouped_sink() as sink:
                for document in self.iter_documents(inputs, result):
                    self._process_document(document, result, sink)
        else:
            for document in self.iter_documents(inputs, result):
                self._process_document(document, result)

        result.processing_time_seconds = time.time() - start_time
        self.logger.info(
            f"Harvest complete - Processed: {result.documents_processed}, "
            f"Success: {result.documents_successful}, Failed: {result.documents_failed}, "
            f"Skipped files: {result.files_skipped}, Time: {result.processing_time_seconds:.2f}s"
        )
        return result

    def iter_documents(self, inputs: Iterable[Union[str, Path]],
                       result: Optional[ProcessingResult] = None) -> Iterator[Path]:
        """
        Yield the VEO files named by inputs, descending into directories.

        Files without one of the configured extensions are logged and counted
        as skipped.
        """
        for item in inputs:
            path = Path(item)
            if path.is_dir():
                for child in sorted(path.rglob("*")):
                    if child.is_file():
                        yield from self._accept(child, result)
            elif path.is_file():
                yield from self._accept(path, result)
            else:
                self.logger.warning(f"File or directory '{path}' does not exist. Ignored.")
                if result is not None:
                    result.files_skipped += 1

    def _accept(self, path: Path, result: Optional[ProcessingResult]) -> Iterator[Path]:
        if path.suffix.lower() in self.config.file_extensions:
            yield path
            return
        self.logger.info(f"Did not process file '{path}' as it was not a VEO or an XML")
        if result is not None:
            result.files_skipped += 1

    def harvest_document(self, document: Path):
        """
        Parse one VEO and return its harvest.

        Returns:
            HarvestRecord, or HarvestTree when nested output is configured

        Raises:
            DocumentError: If the document cannot be read or parsed
        """
        if self.config.nested:
            collector = TreeCollector(self.field_specs)
        else:
            collector = Collector(self.field_specs)
        collector.set_document_identity(document.name, str(document.resolve()))

        parser = VEOParser(collector)
        parser.parse(document)
        self.elements_seen += parser.elements_seen
        self.elements_harvested += parser.elements_harvested

        return collector.tree if self.config.nested else collector.record

    def _process_document(self, document: Path, result: ProcessingResult,
                          sink: Optional[OutputSink] = None) -> None:
        result.documents_processed += 1
        if self.config.chatty:
            self.logger.info(f"Processing {document}")

        try:
            if sink is None:
                self._harvest_to_file(document)
            else:
                harvest = self.harvest_document(document)
        except (DocumentError, OutputError) as e:
            self._abandon(document, e, result)
            return

        if sink is not None:
            # grouped output failures propagate
            sink.write_record(harvest)
        result.documents_successful += 1

    def _harvest_to_file(self, document: Path) -> None:
        output_path = self.output_path_for(document)
        if output_path.exists() and output_path.resolve() == document.resolve():
            raise DocumentError(f"The input file is the same as the output file ({output_path})", str(document))

        harvest = self.harvest_document(document)
        self.logger.info(f"New file {output_path}")
        with open_file_sink(output_path, self.codec, self._header_fields()) as sink:
            sink.write_record(harvest)

    def output_path_for(self, document: Path) -> Path:
        """Per-document output file: the document's stem with the format's extension, in the output directory."""
        return self.config.output_dir / f"{document.stem}.{self.codec.file_extension}"

    def _open_grouped_sink(self) -> OutputSink:
        if self.config.to_stdout:
            return open_stdout_sink(self.codec, self._header_fields())
        return open_file_sink(self.config.resolved_output_file(), self.codec, self._header_fields())

    def _header_fields(self) -> Optional[FieldSpecList]:
        # the nested form has no fixed columns
        return None if self.config.nested else self.field_specs

    def _abandon(self, document: Path, error: Exception, result: ProcessingResult) -> None:
        message = f"Failed processing file '{document}': {error}"
        self.logger.warning(message)
        result.documents_failed += 1
        result.errors.append(message)

    def get_performance_stats(self) -> dict:
        """Element counts across every document parsed by this processor."""
        harvest_percentage = (self.elements_harvested / self.elements_seen * 100) if self.elements_seen > 0 else 0
        return {
            'elements_seen': self.elements_seen,
            'elements_harvested': self.elements_harvested,
            'harvest_percentage': round(harvest_percentage, 2)
        }
