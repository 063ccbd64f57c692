"""
Output sinks.

A sink is one output stream (a file or standard output) bracketed by the
codec's preamble and postamble, with the codec's record separator between
consecutive records.
"""

import logging
import sys

from pathlib import Path
from typing import Any, Optional, TextIO, Union

from ..codecs import RecordCodec
from ..config.processing_defaults import ProcessingDefaults
from ..exceptions import OutputError
from ..models import FieldSpecList


class OutputSink:
    """
    Writes records through a codec to one output stream.

    The preamble is written when the sink is created, the postamble when it
    is closed. Usable as a context manager.
    """

    def __init__(self, writer: TextIO, codec: RecordCodec,
                 field_specs: Optional[FieldSpecList] = None,
                 close_writer: bool = True, name: str = "<output>"):
        self.logger = logging.getLogger(__name__)
        self.writer = writer
        self.codec = codec
        self.close_writer = close_writer
        self.name = name
        self.records_written = 0
        self.closed = False
        self.codec.preamble(self.writer, field_specs)

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()

    def write_record(self, harvest: Any) -> None:
        """
        Write one document's record (a HarvestRecord or HarvestTree).

        The record is rendered before anything is written, so an encoding
        failure leaves the output untouched.
        """
        if self.closed:
            raise OutputError("Output is already closed", self.name)
        text = self.codec.encode(harvest)
        if self.records_written > 0:
            self.codec.separate(self.writer)
        self.codec._write(self.writer, text)
        self.records_written += 1
        self.flush()

    def flush(self) -> None:
        try:
            self.writer.flush()
        except OSError as e:
            raise OutputError(f"Failed flushing output: {e}", self.name) from e

    def close(self) -> None:
        """Write the postamble, flush, and close the stream unless it is standard output."""
        if self.closed:
            return
        self.closed = True
        try:
            self.codec.postamble(self.writer)
            self.writer.flush()
        except OSError as e:
            raise OutputError(f"Failed writing output: {e}", self.name) from e
        finally:
            if self.close_writer:
                self._close_quietly()
        self.logger.debug(f"Closed {self.name} after {self.records_written} records")

    def abort(self) -> None:
        """Close the stream on a best-effort basis after a failure, without the postamble."""
        if self.closed:
            return
        self.closed = True
        if self.close_writer:
            self._close_quietly()

    def _close_quietly(self) -> None:
        try:
            self.writer.close()
        except OSError as e:
            self.logger.warning(f"Failed closing {self.name}: {e}")


def open_file_sink(path: Union[str, Path], codec: RecordCodec,
                   field_specs: Optional[FieldSpecList] = None) -> OutputSink:
    """
    Create (or overwrite) an output file and write the preamble.

    Raises:
        OutputError: If the file cannot be created or written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        writer = path.open("w", encoding=ProcessingDefaults.OUTPUT_ENCODING, newline="")
    except OSError as e:
        raise OutputError(f"Couldn't create output file: {e}", str(path)) from e

    try:
        return OutputSink(writer, codec, field_specs, close_writer=True, name=str(path))
    except OutputError:
        writer.close()
        raise


def open_stdout_sink(codec: RecordCodec, field_specs: Optional[FieldSpecList] = None,
                     stream: Optional[TextIO] = None) -> OutputSink:
    """Sink writing to standard output (never closed by the sink)."""
    return OutputSink(stream or sys.stdout, codec, field_specs, close_writer=False, name="<stdout>")
