"""
Output codecs.

Each of the four encodings is a RecordCodec with a preamble / record /
postamble triple. The module-level functions are the format-keyed entry
points used by the output sinks.
"""

from typing import Any, Dict, Optional, TextIO, Type, Union

from .base import RecordCodec
from .delimited_codec import CSVCodec, DelimitedCodec, TSVCodec
from .escaping import escape_separators, json_quote, split_attribute, xml_encode
from .json_codec import JSONCodec
from .xml_codec import XMLCodec
from ..models import FieldSpecList, OutputFormat


CODECS: Dict[OutputFormat, Type[RecordCodec]] = {
    OutputFormat.XML: XMLCodec,
    OutputFormat.JSON: JSONCodec,
    OutputFormat.CSV: CSVCodec,
    OutputFormat.TSV: TSVCodec,
}


def get_codec(output_format: Union[str, OutputFormat]) -> RecordCodec:
    """Create the codec for an output format (an OutputFormat or its name)."""
    if isinstance(output_format, str):
        output_format = OutputFormat.from_name(output_format)
    return CODECS[output_format]()


def preamble(writer: TextIO, output_format: Union[str, OutputFormat],
             field_specs: Optional[FieldSpecList] = None) -> None:
    get_codec(output_format).preamble(writer, field_specs)


def emit(writer: TextIO, harvest: Any, output_format: Union[str, OutputFormat]) -> None:
    get_codec(output_format).emit(writer, harvest)


def postamble(writer: TextIO, output_format: Union[str, OutputFormat]) -> None:
    get_codec(output_format).postamble(writer)


__all__ = [
    'RecordCodec',
    'XMLCodec',
    'JSONCodec',
    'DelimitedCodec',
    'CSVCodec',
    'TSVCodec',
    'CODECS',
    'get_codec',
    'preamble',
    'emit',
    'postamble',
    'xml_encode',
    'json_quote',
    'escape_separators',
    'split_attribute'
]
