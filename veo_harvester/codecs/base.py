"""
Common behaviour of the output codecs.
"""

import logging

from typing import Any, Optional, TextIO

from ..exceptions import OutputError
from ..harvesting.harvest_tree import HarvestTree
from ..interfaces import RecordCodecInterface
from ..models import FieldSpecList, HarvestRecord, OutputFormat


class RecordCodec(RecordCodecInterface):
    """
    Base class for the four output encodings.

    Subclasses render text; this class writes it and turns writer failures
    into OutputError. emit() accepts either a HarvestRecord (flat form) or a
    HarvestTree (nested form).
    """

    output_format: OutputFormat = None
    record_separator: str = "\n"
    record_terminator: str = ""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @property
    def file_extension(self) -> str:
        return self.output_format.file_extension

    def preamble(self, writer: TextIO, field_specs: Optional[FieldSpecList] = None) -> None:
        self._write(writer, self.render_preamble(field_specs))

    def emit(self, writer: TextIO, harvest: Any) -> None:
        self._write(writer, self.encode(harvest))

    def postamble(self, writer: TextIO) -> None:
        self._write(writer, self.render_postamble())

    def separate(self, writer: TextIO) -> None:
        """Write the separator that goes between two records."""
        self._write(writer, self.record_separator)

    def encode(self, harvest: Any) -> str:
        """Text written for one record: the rendered record and its terminator."""
        return self.render(harvest) + self.record_terminator

    def render(self, harvest: Any) -> str:
        """Render one document's record as text."""
        if isinstance(harvest, HarvestTree):
            return self.render_tree(harvest)
        if isinstance(harvest, HarvestRecord):
            return self.render_record(harvest)
        raise TypeError(f"Cannot encode {type(harvest).__name__}; expected HarvestRecord or HarvestTree")

    def render_preamble(self, field_specs: Optional[FieldSpecList] = None) -> str:
        return ""

    def render_postamble(self) -> str:
        return ""

    def render_record(self, record: HarvestRecord) -> str:
        raise NotImplementedError

    def render_tree(self, tree: HarvestTree) -> str:
        raise NotImplementedError

    def _write(self, writer: TextIO, text: str) -> None:
        if not text:
            return
        try:
            writer.write(text)
        except OSError as e:
            raise OutputError(f"Failed writing {self.output_format.name} output: {e}") from e
