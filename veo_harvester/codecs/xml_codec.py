"""
XML output.

Each document becomes one <Report> element. In the flat form every field is
one child element per harvested value (or one element carrying the default);
in the nested form the captured subtrees are reproduced with one space of
indentation per level.
"""

from typing import List, Optional

from .base import RecordCodec
from .escaping import split_attribute, xml_encode
from ..config.processing_defaults import ProcessingDefaults
from ..harvesting.harvest_tree import HarvestNode, HarvestTree
from ..models import FieldSpecList, HarvestRecord, OutputFormat


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>\n'


def render_attributes(attributes: List[str]) -> str:
    """Harvested name="value" attributes as XML attribute text (leading space included)."""
    parts = []
    for attribute in attributes:
        name, value = split_attribute(attribute)
        parts.append(f' {name}="{xml_encode(value)}"')
    return "".join(parts)


def render_element(tag: str, attributes: List[str], value: Optional[str], indent: str = " ") -> str:
    """One element; self-closed when there is no value."""
    attrs = render_attributes(attributes)
    if value is None:
        return f"{indent}<{tag}{attrs}/>"
    return f"{indent}<{tag}{attrs}>{xml_encode(value)}</{tag}>"


class XMLCodec(RecordCodec):
    """Encodes harvested records as XML."""

    output_format = OutputFormat.XML
    record_separator = "\n"

    def __init__(self, report_tag: str = ProcessingDefaults.REPORT_TAG):
        super().__init__()
        self.report_tag = report_tag

    def render_preamble(self, field_specs: Optional[FieldSpecList] = None) -> str:
        return XML_DECLARATION + "<report>\n"

    def render_postamble(self) -> str:
        return "\n</report>\n"

    def render_record(self, record: HarvestRecord) -> str:
        elements = []
        for harvest in record:
            if not harvest.values:
                elements.append(render_element(harvest.tag, harvest.attributes, harvest.default))
            else:
                # every occurrence carries the attributes pooled across occurrences
                for value in harvest.values:
                    elements.append(render_element(harvest.tag, harvest.attributes, value))
        body = "\n".join(elements)
        return f"<{self.report_tag}>\n{body}\n</{self.report_tag}>"

    def render_tree(self, tree: HarvestTree) -> str:
        lines: List[str] = []
        self._render_node(tree.root, 0, lines)
        return "\n".join(lines)

    def _render_node(self, node: HarvestNode, depth: int, lines: List[str]) -> None:
        indent = " " * depth
        if node.value is not None or not node.children:
            lines.append(render_element(node.tag, node.attributes, node.value, indent))
            return
        lines.append(f"{indent}<{node.tag}{render_attributes(node.attributes)}>")
        for child in node.children:
            self._render_node(child, depth + 1, lines)
        lines.append(f"{indent}</{node.tag}>")
