"""
JSON output.

XML and JSON disagree in two ways that this codec reconciles:

- XML repeats an element to express multiplicity; JSON cannot repeat a
  property, so repetition becomes an array. Which siblings form one repeating
  group was decided when the tree was built (HarvestNode.same_tag_link); each
  chain is rendered once, as an array, and its members are marked emitted so
  they are not rendered again as ordinary properties.
- XML attributes have no JSON counterpart; they become ordinary properties
  that precede the element's child properties. An element with both
  attributes and a text value becomes an object whose "#text" property holds
  the value.

A field with no harvested value and no default is rendered as the string
"null", never as the JSON null literal. A field harvested several times is
rendered as an array of single-key objects whose key is the value.
"""

from typing import List, Optional

from .base import RecordCodec
from .escaping import json_quote, split_attribute
from ..harvesting.harvest_tree import HarvestNode, HarvestTree
from ..models import FieldHarvest, FieldSpecList, HarvestRecord, OutputFormat


NULL_STRING = json_quote("null")
TEXT_PROPERTY = json_quote("#text")


class JSONCodec(RecordCodec):
    """Encodes harvested records as JSON objects inside a {"report": [...]} wrapper."""

    output_format = OutputFormat.JSON
    record_separator = ",\n"

    def render_preamble(self, field_specs: Optional[FieldSpecList] = None) -> str:
        return '{"report":['

    def render_postamble(self) -> str:
        return "]}"

    # Flat form

    def render_record(self, record: HarvestRecord) -> str:
        properties = [f"{json_quote(harvest.tag)}: {self._field_value(harvest)}" for harvest in record]
        return "{" + ", ".join(properties) + "}"

    def _field_value(self, harvest: FieldHarvest) -> str:
        if not harvest.values:
            if harvest.default is not None:
                return json_quote(harvest.default)
            return NULL_STRING
        if len(harvest.values) == 1:
            return json_quote(harvest.values[0])
        items = ["{" + json_quote(value) + ": " + NULL_STRING + "}" for value in harvest.values]
        return "[" + ", ".join(items) + "]"

    # Nested form

    def render_tree(self, tree: HarvestTree) -> str:
        tree.root.reset_emitted()
        return self._render_object(tree.root)

    def _render_property(self, node: HarvestNode) -> str:
        """Render node as "tag": value. The caller skips nodes already emitted."""
        if node.same_tag_link is not None:
            items = []
            for member in node.iter_same_tag():
                member.emitted = True
                items.append(self._render_array_item(member))
            value = "[" + ", ".join(items) + "]"
        elif node.value is not None:
            value = self._render_leaf(node)
        elif node.children or node.attributes:
            value = self._render_object(node)
        else:
            value = NULL_STRING
        return f"{json_quote(node.tag)}: {value}"

    def _render_array_item(self, node: HarvestNode) -> str:
        if node.value is not None:
            return self._render_leaf(node)
        return self._render_object(node)

    def _render_leaf(self, node: HarvestNode) -> str:
        """A bare string, or an object of the attributes plus the value under "#text"."""
        if not node.attributes:
            return json_quote(node.value)
        properties = self._attribute_properties(node)
        properties.append(f"{TEXT_PROPERTY}: {json_quote(node.value)}")
        return "{" + ", ".join(properties) + "}"

    def _attribute_properties(self, node: HarvestNode) -> List[str]:
        properties = []
        for attribute in node.attributes:
            name, value = split_attribute(attribute)
            properties.append(f"{json_quote(name)}: {json_quote(value)}")
        return properties

    def _render_object(self, node: HarvestNode) -> str:
        """Attributes as properties, then the children not yet emitted as part of an array."""
        properties = self._attribute_properties(node)
        for child in node.children:
            if child.emitted:
                continue
            properties.append(self._render_property(child))
        return "{" + ", ".join(properties) + "}"
