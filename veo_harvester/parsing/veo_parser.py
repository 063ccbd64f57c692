"""
Streaming VEO parser.

This module walks a VEO with lxml's iterparse and reports each element to an
ElementConsumerInterface using a two-phase protocol: interest is requested
when the element starts, and the element's value is delivered when it ends,
only for elements the consumer asked for.
"""

import io
import logging

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from lxml import etree

from ..exceptions import DocumentError
from ..interfaces import DocumentParserInterface, ElementConsumerInterface


XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class VEOParser(DocumentParserInterface):
    """
    Memory-efficient parser feeding element events to a consumer.

    Element paths are built from qualified names exactly as they are written
    in the document (e.g. 'vers:VERSEncapsulatedObject/vers:SignedObject'),
    joined with '/' and without a leading slash.

    Features:
    - Streaming XML processing using lxml.etree.iterparse()
    - Elements outside any element of interest are cleared as soon as they
      end, so memory stays bounded by the largest harvested subtree
    - External entities and network access disabled
    - Values are the stripped text content of the element, None when empty
    """

    def __init__(self, consumer: ElementConsumerInterface):
        """
        Initialize the parser.

        Args:
            consumer: Receiver of the element events
        """
        self.consumer = consumer
        self.logger = logging.getLogger(__name__)

        # Performance tracking
        self.documents_parsed = 0
        self.elements_seen = 0
        self.elements_harvested = 0

    def parse(self, document_path: Union[str, Path]) -> None:
        """
        Stream a VEO file.

        Raises:
            DocumentError: If the file cannot be read or is not well-formed XML
        """
        document_path = Path(document_path)
        try:
            with document_path.open("rb") as fh:
                self._stream(fh, str(document_path))
        except OSError as e:
            raise DocumentError(f"Failed to read document: {e}", str(document_path)) from e

    def parse_string(self, content: Union[str, bytes], source: str = "<string>") -> None:
        """
        Stream an in-memory document.

        Raises:
            DocumentError: If the content is empty or not well-formed XML
        """
        if content is None or not content.strip():
            raise DocumentError("XML content is empty or None", source)
        if isinstance(content, str):
            # Remove BOM if present
            if content.startswith('\ufeff'):
                content = content[1:]
            content = content.encode("utf-8")
        self._stream(io.BytesIO(content), source)

    def _stream(self, stream, source: str) -> None:
        path_stack: List[str] = []
        interest_stack: List[bool] = []
        open_interest = 0

        try:
            context = etree.iterparse(
                stream,
                events=("start", "end"),
                resolve_entities=False,  # Security: don't resolve external entities
                no_network=True,  # Security: disable network access
                remove_comments=True,
                remove_pis=True,
                huge_tree=True  # embedded document content can exceed libxml2's 10MB text limit
            )
            for event, element in context:
                if event == "start":
                    self.elements_seen += 1
                    path_stack.append(self._qualified_name(element))
                    element_path = "/".join(path_stack)
                    interested = bool(self.consumer.on_element_start(element_path, self._attributes(element)))
                    interest_stack.append(interested)
                    if interested:
                        open_interest += 1
                    continue

                element_path = "/".join(path_stack)
                if interest_stack.pop():
                    open_interest -= 1
                    self.elements_harvested += 1
                    self.consumer.on_element_end(element_path, self._element_value(element))
                if open_interest == 0:
                    self._release(element)
                path_stack.pop()

        except etree.XMLSyntaxError as e:
            raise DocumentError(f"XML syntax error: {e}", source) from e
        except ValueError as e:
            raise DocumentError(f"Invalid XML name: {e}", source) from e

        self.documents_parsed += 1
        self.logger.debug(f"Parsed {source} (document #{self.documents_parsed})")

    def _release(self, element) -> None:
        """Free an element no consumer needs any more, along with its already processed siblings."""
        element.clear(keep_tail=True)
        parent = element.getparent()
        if parent is not None:
            while element.getprevious() is not None:
                del parent[0]

    def _element_value(self, element) -> Optional[str]:
        value = "".join(element.itertext()).strip()
        return value or None

    def _qualified_name(self, element) -> str:
        local_name = self._local_name(element.tag)
        if element.prefix:
            return f"{element.prefix}:{local_name}"
        return local_name

    def _local_name(self, name: str) -> str:
        """
        Local part of a tag or attribute name in lxml's '{uri}local' form.

        A name using an undeclared prefix has no namespace and keeps the
        prefix as written ('vers:Title').
        """
        if name.startswith("{"):
            return name[name.index("}") + 1:]
        return name

    def _attributes(self, element) -> List[Tuple[str, str]]:
        """Attributes in document order with qualified names."""
        if not element.attrib:
            return []
        prefixes = self._namespace_prefixes(element)
        attributes = []
        for name, value in element.attrib.items():
            if name.startswith("{"):
                prefix = prefixes.get(name[1:name.index("}")])
                local_name = self._local_name(name)
                attributes.append((f"{prefix}:{local_name}" if prefix else local_name, value))
            else:
                attributes.append((name, value))
        return attributes

    def _namespace_prefixes(self, element) -> Dict[str, str]:
        prefixes = {uri: prefix for prefix, uri in element.nsmap.items() if prefix}
        prefixes.setdefault(XML_NAMESPACE, "xml")
        return prefixes

    def get_performance_stats(self) -> Dict[str, Any]:
        """
        Get parser performance statistics.

        Returns:
            Dictionary containing performance metrics
        """
        harvest_percentage = (self.elements_harvested / self.elements_seen * 100) if self.elements_seen > 0 else 0
        return {
            'documents_parsed': self.documents_parsed,
            'elements_seen': self.elements_seen,
            'elements_harvested': self.elements_harvested,
            'harvest_percentage': round(harvest_percentage, 2)
        }

    def reset_stats(self) -> None:
        """Reset performance statistics."""
        self.documents_parsed = 0
        self.elements_seen = 0
        self.elements_harvested = 0

        self.logger.debug("VEOParser statistics reset")
