"""
Parser adapters.

Collectors receive the streaming parser's element events and copy what the
control file asks for into the current document's harvest: leaf values and
attributes per configured field (Collector), or whole subtrees under the
configured paths (TreeCollector).
"""

import logging

from typing import List, Optional, Tuple

from .harvest_tree import HarvestNode, HarvestTree, format_attributes
from ..exceptions import DocumentError
from ..interfaces import ElementConsumerInterface
from ..models import FieldSpecList, HarvestRecord


class Collector(ElementConsumerInterface):
    """
    Harvests the values and attributes of configured fields into a HarvestRecord.

    Matching is exact string equality of the full element path. A path may
    match several fields (overlapping configuration); each of them receives
    the attributes and the value.
    """

    def __init__(self, field_specs: FieldSpecList, record: Optional[HarvestRecord] = None):
        self.logger = logging.getLogger(__name__)
        self.field_specs = field_specs
        self.record = record if record is not None else field_specs.new_record()

    def on_element_start(self, element_path: str, attributes: List[Tuple[str, str]]) -> bool:
        matches = self.record.matching(element_path)
        if not matches:
            return False
        formatted = format_attributes(attributes)
        for harvest in matches:
            harvest.attributes.extend(formatted)
        return True

    def on_element_end(self, element_path: str, value: Optional[str]) -> None:
        for harvest in self.record.matching(element_path):
            if value is not None:
                self.logger.debug(f"Harvesting {element_path} '{value}'")
                harvest.values.append(value)
            else:
                self.logger.debug(f"Harvesting {element_path} <Null>")

    def reset(self) -> None:
        self.record.clear()

    def set_document_identity(self, file_name: str, file_path: str) -> None:
        self.record.set_document_identity(file_name, file_path)


class TreeCollector(ElementConsumerInterface):
    """
    Captures the complete subtree under every element matching a configured path.

    Each captured element becomes a HarvestNode; top-level captures hang off
    the HarvestTree root, so repeated captures of the same path are chained
    like any other repeating siblings.
    """

    def __init__(self, field_specs: FieldSpecList, tree: Optional[HarvestTree] = None):
        self.logger = logging.getLogger(__name__)
        self.field_specs = field_specs
        self.tree = tree if tree is not None else HarvestTree()
        self._open_nodes: List[HarvestNode] = []

    def on_element_start(self, element_path: str, attributes: List[Tuple[str, str]]) -> bool:
        if not self._open_nodes and not self.field_specs.matching_positions(element_path):
            return False

        node = HarvestNode(element_path, format_attributes(attributes))
        if self._open_nodes:
            self._open_nodes[-1].add_child(node)
        else:
            self.logger.debug(f"Capturing subtree at {element_path}")
            self.tree.add(node)
        self._open_nodes.append(node)
        return True

    def on_element_end(self, element_path: str, value: Optional[str]) -> None:
        if not self._open_nodes or self._open_nodes[-1].path != element_path:
            raise DocumentError(f"Unexpected end of element '{element_path}' while capturing")
        node = self._open_nodes.pop()
        if node.is_leaf:
            node.value = value
        if not self._open_nodes and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"Captured subtree:\n{node.describe()}")

    def reset(self) -> None:
        self.tree.clear()
        self._open_nodes = []

    def set_document_identity(self, file_name: str, file_path: str) -> None:
        self.tree.set_document_identity(file_name, file_path)
