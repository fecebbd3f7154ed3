"""
Document resolution.

The mailbox never owns the document it writes into. It asks a
DocumentProvider for the live tree every time a session is set up, so the
host-specific lookup steps stay behind a single method.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union, runtime_checkable
from xml.dom import Node, minidom
from xml.parsers.expat import ExpatError

from .protocol import DocumentUnavailable

logger = logging.getLogger(__name__)

# Embedding handle -> browser -> content window -> document
RESOLUTION_CHAIN = ("browser", "content_window", "document")

# Whitespace must be written as character references or the parser
# normalizes it to spaces when reading attribute values back
_ATTRIBUTE_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
}


def escape_attribute(value: str) -> str:
    """Escape an attribute value so it parses back unchanged."""
    return "".join(_ATTRIBUTE_ESCAPES.get(ch, ch) for ch in value)


def _write_node(node: Any, writer: io.StringIO) -> None:
    if node.nodeType != Node.ELEMENT_NODE:
        node.writexml(writer)
        return

    writer.write(f"<{node.tagName}")
    for name, value in node.attributes.items():
        writer.write(f' {name}="{escape_attribute(value)}"')

    if not node.childNodes:
        writer.write("/>")
        return

    writer.write(">")
    for child in node.childNodes:
        _write_node(child, writer)
    writer.write(f"</{node.tagName}>")


def serialize_document(document: Any, encoding: Optional[str] = None) -> str:
    """
    Serialize a DOM document to text.

    Output matches minidom's toxml() except that tabs, newlines and
    carriage returns inside attribute values are written as character
    references, so call records survive a save and reload.
    """
    writer = io.StringIO()
    if encoding is None:
        writer.write('<?xml version="1.0" ?>')
    else:
        writer.write(f'<?xml version="1.0" encoding="{encoding}"?>')
    for child in document.childNodes:
        _write_node(child, writer)
    return writer.getvalue()


@runtime_checkable
class DocumentProvider(Protocol):
    """Anything that can hand out the live document."""

    def resolve_document(self) -> Any:
        ...


class EmbeddingDocumentProvider:
    """
    Resolves the document from an opaque embedding handle.

    Each step of RESOLUTION_CHAIN is read as an attribute of the previous
    object and called if it is callable, so both property-style and
    getter-style embeddings work:

        handle.browser.content_window.document
        handle.browser().content_window().document()
    """

    def __init__(self, handle: Any, chain: tuple[str, ...] = RESOLUTION_CHAIN):
        self._handle = handle
        self._chain = chain

    def resolve_document(self) -> Any:
        if self._handle is None:
            raise DocumentUnavailable("No embedding handle", details={"stage": "handle"})

        current = self._handle
        for stage in self._chain:
            try:
                step = getattr(current, stage, None)
                if callable(step):
                    step = step()
            except Exception as e:
                raise DocumentUnavailable(
                    f"Failed to resolve {stage}",
                    details={"stage": stage, "cause": str(e)},
                ) from e

            if step is None:
                raise DocumentUnavailable(
                    f"Embedding has no {stage}",
                    details={"stage": stage},
                )
            current = step

        return current


class StaticDocumentProvider:
    """Provider for a document that is already at hand."""

    def __init__(self, document: Any):
        self._document = document

    def resolve_document(self) -> Any:
        if self._document is None:
            raise DocumentUnavailable("Document not loaded", details={"stage": "document"})
        return self._document


class FileDocumentProvider:
    """
    Loads an XML/XHTML document from disk.

    The parsed tree is cached, so repeated resolution returns the same
    document and mutations are visible until save() writes them back.
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._document: Optional[minidom.Document] = None

    def resolve_document(self) -> minidom.Document:
        if self._document is not None:
            return self._document

        if not self.path.is_file():
            raise DocumentUnavailable(
                f"Document file not found: {self.path}",
                details={"stage": "document", "path": str(self.path)},
            )

        try:
            self._document = minidom.parse(str(self.path))
        except (ExpatError, OSError) as e:
            raise DocumentUnavailable(
                f"Failed to parse document: {self.path}",
                details={"stage": "document", "cause": str(e)},
            ) from e

        logger.debug(f"Loaded document from {self.path}")
        return self._document

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Serialize the cached document back to disk."""
        if self._document is None:
            raise DocumentUnavailable("Nothing to save: document not loaded")

        target = Path(path) if path is not None else self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        text = serialize_document(self._document, self.encoding)
        target.write_bytes(text.encode(self.encoding, "xmlcharrefreplace"))
        logger.debug(f"Saved document to {target}")
        return target


def get_document(source: Any) -> Any:
    """
    Resolve the live document.

    Args:
        source: A DocumentProvider or a raw embedding handle

    Returns:
        The document object

    Raises:
        DocumentUnavailable: If any step of the resolution fails
    """
    if isinstance(source, DocumentProvider):
        return source.resolve_document()
    return EmbeddingDocumentProvider(source).resolve_document()
