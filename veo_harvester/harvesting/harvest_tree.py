"""
Nested capture model.

When a configured path names a non-leaf element, the whole subtree under it is
captured as a tree of HarvestNode objects so that it can be re-expressed in
another encoding. JSON cannot repeat a property name, so siblings that share a
tag are chained together as they are inserted; the JSON codec turns each chain
into an array.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..config.processing_defaults import ProcessingDefaults


def final_segment(element_path: str) -> str:
    """Final (tag) segment of a slash-delimited element path."""
    return element_path[element_path.rfind("/") + 1:]


def format_attribute(name: str, value: str) -> str:
    """Attribute as harvested: name="trimmed value"."""
    return f'{name}="{value.strip()}"'


def format_attributes(attributes: Optional[Iterable[Tuple[str, str]]]) -> List[str]:
    if not attributes:
        return []
    return [format_attribute(name, value) for name, value in attributes]


class HarvestNode:
    """
    One captured element occurrence.

    Attributes:
        path: Full element path from the document root
        tag: Final path segment
        attributes: Harvested name="value" strings, document order
        value: Text of a leaf occurrence (None for elements with children)
        children: Child occurrences, document order
        same_tag_link: Next later sibling with the same tag
        emitted: Set by the JSON codec once the node has been folded into an array
    """

    def __init__(self, path: str, attributes: Optional[List[str]] = None):
        self.path = path
        self.tag = final_segment(path)
        self.attributes: List[str] = list(attributes or [])
        self.value: Optional[str] = None
        self.children: List["HarvestNode"] = []
        self.same_tag_link: Optional["HarvestNode"] = None
        self.emitted = False
        # last child seen with each tag; the next child with that tag is linked from it
        self._last_child_by_tag: Dict[str, "HarvestNode"] = {}

    def __repr__(self) -> str:
        return f"HarvestNode({self.path!r}, children={len(self.children)}, value={self.value!r})"

    def __str__(self) -> str:
        return self.describe()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add_child(self, node: "HarvestNode") -> None:
        """Append a child, linking it from the previous sibling with the same tag."""
        previous = self._last_child_by_tag.get(node.tag)
        if previous is not None:
            previous.same_tag_link = node
        self._last_child_by_tag[node.tag] = node
        self.children.append(node)

    def iter_same_tag(self) -> Iterator["HarvestNode"]:
        """This node followed by every later sibling sharing its tag, document order."""
        node = self
        while node is not None:
            yield node
            node = node.same_tag_link

    def walk(self) -> Iterator["HarvestNode"]:
        """This node and all its descendants, depth first in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaf_values(self) -> List[str]:
        return [node.value for node in self.walk() if node.is_leaf and node.value is not None]

    def reset_emitted(self) -> None:
        for node in self.walk():
            node.emitted = False

    def describe(self, depth: int = 0) -> str:
        """Indented debugging representation of the subtree."""
        indent = " " * depth
        if self.value is not None:
            return f"{indent}{{{self.tag}: '{self.value}'}}\n"
        lines = [f"{indent}{{{self.tag}: "]
        for child in self.children:
            lines.append("\n" + child.describe(depth + 1))
        lines.append(f"{indent}}}\n")
        return "".join(lines)


class HarvestTree:
    """
    The subtrees captured from one document, under a synthetic report root.

    Created fresh for each document and discarded after serialization.
    """

    def __init__(self, root_tag: str = ProcessingDefaults.REPORT_TAG):
        self.root = HarvestNode(root_tag)
        self.document_name: Optional[str] = None
        self.document_path: Optional[str] = None

    def __iter__(self) -> Iterator[HarvestNode]:
        return iter(self.root.children)

    def __len__(self) -> int:
        return len(self.root.children)

    @property
    def is_empty(self) -> bool:
        return not self.root.children

    def add(self, node: HarvestNode) -> None:
        """Add a top-level captured subtree."""
        self.root.add_child(node)

    def leaf_values(self) -> List[str]:
        return [value for node in self.root.children for value in node.leaf_values()]

    def clear(self) -> None:
        self.root = HarvestNode(self.root.tag)
        self.document_name = None
        self.document_path = None

    def set_document_identity(self, file_name: str, file_path: str) -> None:
        self.document_name = file_name
        self.document_path = file_path
