"""
Thin query layer over lxml used by the container and package extractors.

Element names are matched by their lexical qualified name (``dc:title``,
``metadata``), not by namespace URI. EPUB tooling writes the Dublin Core
prefix as ``dc:`` by convention and the OPF vocabulary in the default
namespace, so the lexical form is what the extractors look for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from lxml import etree

from epubmeta.exceptions import (
    ExtractionDocumentTooLargeError,
    ExtractionFailedError,
    ExtractionFileNotFoundError,
    ExtractionParseError,
)

logger = logging.getLogger(__name__)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


@dataclass(frozen=True)
class XmlDocumentLimits:
    """
    Limits applied before an XML document is handed to the parser.

    Container and package documents are small; anything beyond the default
    is almost certainly not an OPF file.
    """

    max_document_bytes: int = 64 * 1024 * 1024  # 64 MiB


DEFAULT_XML_DOCUMENT_LIMITS = XmlDocumentLimits()


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=False,
        huge_tree=False,
    )


def load_xml_root(
    path: str | Path,
    *,
    limits: XmlDocumentLimits = DEFAULT_XML_DOCUMENT_LIMITS,
) -> etree._Element:
    """
    Read ``path`` and return the root element of the parsed document.

    Raises:
        ExtractionFileNotFoundError: The file does not exist.
        ExtractionDocumentTooLargeError: The file exceeds ``limits``.
        ExtractionParseError: The file is not well-formed XML.
        ExtractionFailedError: The file exists but could not be read.
    """
    path = Path(path)
    try:
        size = path.stat().st_size
        if size > limits.max_document_bytes:
            raise ExtractionDocumentTooLargeError(
                f"XML document too large ({size} bytes > {limits.max_document_bytes})"
                f" [{path}]"
            )
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise ExtractionFileNotFoundError(str(path), cause=exc) from exc
    except OSError as exc:
        raise ExtractionFailedError(f"Failed to read {path}", cause=exc) from exc

    logger.debug("Parsing XML document %s (%d bytes)", path, len(data))
    try:
        return etree.fromstring(data, parser=_make_parser())
    except etree.XMLSyntaxError as exc:
        raise ExtractionParseError(str(path), cause=exc) from exc


def qualified_name(node: etree._Element) -> str:
    """Return the lexical ``prefix:local`` name of ``node``."""
    local = etree.QName(node).localname
    if node.prefix:
        return f"{node.prefix}:{local}"
    return local


def _element_children(node: etree._Element):
    # Comments and processing instructions carry a non-string tag.
    return (child for child in node if isinstance(child.tag, str))


def find_all_children(
    node: Optional[etree._Element], name: str
) -> List[etree._Element]:
    """Return every direct child of ``node`` named ``name``, in document order."""
    if node is None:
        return []
    return [child for child in _element_children(node) if qualified_name(child) == name]


def find_first_child(
    node: Optional[etree._Element], name: str
) -> Optional[etree._Element]:
    """Return the first direct child of ``node`` named ``name``, or None."""
    if node is None:
        return None
    for child in _element_children(node):
        if qualified_name(child) == name:
            return child
    return None


def get_attribute(node: etree._Element, name: str) -> Optional[str]:
    """
    Look up an attribute by its lexical name.

    ``xml:lang`` and other prefixed names are resolved through the element's
    in-scope namespaces. Returns None when the attribute is absent.
    """
    if ":" not in name:
        return node.get(name)

    prefix, local = name.split(":", 1)
    if prefix == "xml":
        uri = XML_NAMESPACE
    else:
        uri = node.nsmap.get(prefix)
        if uri is None:
            return None
    return node.get(f"{{{uri}}}{local}")


def inner_text(node: etree._Element) -> str:
    """Concatenated text of ``node`` and all of its descendants."""
    return etree.tostring(node, method="text", encoding="unicode", with_tail=False)
