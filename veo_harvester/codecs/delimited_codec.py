"""
Comma (CSV) and tab (TSV) separated output.

One line per document, one column per configured field. Several values of one
field share a column, joined by '$$'. Attributes are not output.

Quoting follows the tool's long-standing rule rather than RFC 4180: only text
containing the separator is quoted, and double quotes inside it are escaped
with a backslash instead of being doubled.
"""

from typing import Optional

from .base import RecordCodec
from .escaping import escape_separators
from ..config.processing_defaults import ProcessingDefaults
from ..harvesting.harvest_tree import HarvestTree
from ..models import FieldHarvest, FieldSpecList, HarvestRecord, OutputFormat


class DelimitedCodec(RecordCodec):
    """Separator-delimited lines; subclasses fix the separator."""

    separator: str = ","
    record_separator = ""
    record_terminator = "\n"

    def render_preamble(self, field_specs: Optional[FieldSpecList] = None) -> str:
        # column headings; the nested form has no fixed columns
        if not field_specs:
            return ""
        return self.separator.join(self.escape(tag) for tag in field_specs.tags) + "\n"

    def escape(self, text: str) -> str:
        return escape_separators(text, self.separator)

    def render_record(self, record: HarvestRecord) -> str:
        return self.separator.join(self._column(harvest) for harvest in record)

    def _column(self, harvest: FieldHarvest) -> str:
        if not harvest.values:
            return self.escape(harvest.default) if harvest.default is not None else ""
        return ProcessingDefaults.MULTI_VALUE_SEPARATOR.join(self.escape(value) for value in harvest.values)

    def render_tree(self, tree: HarvestTree) -> str:
        return self.separator.join(self.escape(value) for value in tree.leaf_values())


class CSVCodec(DelimitedCodec):
    """Comma separated values."""

    output_format = OutputFormat.CSV
    separator = ","


class TSVCodec(DelimitedCodec):
    """Tab separated values."""

    output_format = OutputFormat.TSV
    separator = "\t"
