"""
OPF Package Document Extractor
==============================

Maps the package document of an unpacked EPUB 3 directory onto the frozen
records in :mod:`epubmeta.extractors.data_types`.

Package Document Structure
--------------------------
The ``package`` root element carries ``version``, ``unique-identifier``,
``xml:lang``, ``dir`` and ``id`` and contains, in order:

    <metadata>: Dublin Core elements (``dc:`` prefix) plus ``meta`` and ``link``
    <manifest>: one ``item`` per publication resource
    <spine>: ``itemref`` entries in reading order
    <bindings>: optional, ``mediaType`` handlers (deprecated in EPUB 3.1+)

Extraction Rules
----------------
- Repeatable elements (identifier, title, language, contributor, creator,
  meta, link, item, itemref, mediaType) are kept in document order.
- Singular elements (date, source, type, description, format, publisher,
  relation, rights, subject, coverage) take the first occurrence in
  document order.
- Attributes the schema treats as optional map to None when absent so that
  an absent attribute differs from an empty one. Required attributes map
  to an empty string when absent.
- A package document without ``manifest`` or ``spine`` raises
  ExtractionStructureError. A missing ``metadata`` element yields empty
  metadata.
- The document is not validated against the OPF schema.

Usage
-----
    >>> from epubmeta import parse_package_document
    >>> package = parse_package_document("unpacked-book/")
    >>> package.metadata.titles[0].value
    'Moby-Dick'
    >>> [item.href for item in package.reading_order()]
    ['chapter_001.xhtml', 'chapter_002.xhtml']
"""

import logging
from pathlib import Path
from typing import Optional

from lxml import etree

from epubmeta.exceptions import (
    ExtractionError,
    ExtractionFailedError,
    ExtractionStructureError,
)
from epubmeta.extractors.container_extractor import find_package_document_path
from epubmeta.extractors.data_types import (
    EpubBindings,
    EpubItem,
    EpubItemref,
    EpubLink,
    EpubLocalizedElement,
    EpubManifest,
    EpubMediaType,
    EpubMeta,
    EpubMetadata,
    EpubPackage,
    EpubSimpleElement,
    EpubSpine,
)
from epubmeta.extractors.util.xml_tree import (
    DEFAULT_XML_DOCUMENT_LIMITS,
    XmlDocumentLimits,
    find_all_children,
    find_first_child,
    get_attribute,
    inner_text,
    load_xml_root,
)

logger = logging.getLogger(__name__)


def _required(node: etree._Element, name: str) -> str:
    return get_attribute(node, name) or ""


def _simple_element(node: etree._Element) -> EpubSimpleElement:
    return EpubSimpleElement(
        value=inner_text(node),
        id=get_attribute(node, "id"),
    )


def _localized_element(node: etree._Element) -> EpubLocalizedElement:
    return EpubLocalizedElement(
        value=inner_text(node),
        id=get_attribute(node, "id"),
        lang=get_attribute(node, "xml:lang"),
        dir=get_attribute(node, "dir"),
    )


def _meta(node: etree._Element) -> EpubMeta:
    return EpubMeta(
        property=_required(node, "property"),
        value=inner_text(node),
        refines=get_attribute(node, "refines"),
        id=get_attribute(node, "id"),
        scheme=get_attribute(node, "scheme"),
    )


def _link(node: etree._Element) -> EpubLink:
    return EpubLink(
        href=_required(node, "href"),
        rel=get_attribute(node, "rel"),
        id=get_attribute(node, "id"),
        refines=get_attribute(node, "refines"),
        media_type=get_attribute(node, "media-type"),
    )


def _first(metadata: Optional[etree._Element], name: str, mapper):
    node = find_first_child(metadata, name)
    return mapper(node) if node is not None else None


def _all(metadata: Optional[etree._Element], name: str, mapper):
    return tuple(mapper(node) for node in find_all_children(metadata, name))


def _parse_metadata(metadata: Optional[etree._Element]) -> EpubMetadata:
    """Extract Dublin Core, meta and link elements; a None node yields empty metadata."""
    date = find_first_child(metadata, "dc:date")

    return EpubMetadata(
        identifiers=_all(metadata, "dc:identifier", _simple_element),
        titles=_all(metadata, "dc:title", _localized_element),
        languages=_all(metadata, "dc:language", _simple_element),
        contributors=_all(metadata, "dc:contributor", _localized_element),
        creators=_all(metadata, "dc:creator", _localized_element),
        date=inner_text(date) if date is not None else None,
        source=_first(metadata, "dc:source", _simple_element),
        epub_type=_first(metadata, "dc:type", _simple_element),
        metas=_all(metadata, "meta", _meta),
        description=_first(metadata, "dc:description", _localized_element),
        format=_first(metadata, "dc:format", _simple_element),
        publisher=_first(metadata, "dc:publisher", _localized_element),
        relation=_first(metadata, "dc:relation", _localized_element),
        rights=_first(metadata, "dc:rights", _localized_element),
        subject=_first(metadata, "dc:subject", _localized_element),
        coverage=_first(metadata, "dc:coverage", _localized_element),
        links=_all(metadata, "link", _link),
    )


def _parse_manifest(manifest: etree._Element) -> EpubManifest:
    items = tuple(
        EpubItem(
            id=_required(node, "id"),
            href=_required(node, "href"),
            media_type=_required(node, "media-type"),
            fallback=get_attribute(node, "fallback"),
            properties=get_attribute(node, "properties"),
            media_overlay=get_attribute(node, "media-overlay"),
        )
        for node in find_all_children(manifest, "item")
    )
    return EpubManifest(items=items, id=get_attribute(manifest, "id"))


def _parse_spine(spine: etree._Element) -> EpubSpine:
    itemrefs = tuple(
        EpubItemref(
            idref=_required(node, "idref"),
            linear=get_attribute(node, "linear"),
            id=get_attribute(node, "id"),
            properties=get_attribute(node, "properties"),
        )
        for node in find_all_children(spine, "itemref")
    )
    return EpubSpine(
        itemrefs=itemrefs,
        id=get_attribute(spine, "id"),
        toc=get_attribute(spine, "toc"),
        page_progression_direction=get_attribute(spine, "page-progression-direction"),
    )


def _parse_bindings(bindings: Optional[etree._Element]) -> Optional[EpubBindings]:
    if bindings is None:
        return None
    return EpubBindings(
        media_types=tuple(
            EpubMediaType(
                media_type=_required(node, "media-type"),
                handler=_required(node, "handler"),
            )
            for node in find_all_children(bindings, "mediaType")
        )
    )


def parse_package_root(root: etree._Element, source: str = None) -> EpubPackage:
    """
    Build an EpubPackage from an already loaded ``package`` element.

    Raises:
        ExtractionStructureError: ``manifest`` or ``spine`` is missing.
    """
    manifest = find_first_child(root, "manifest")
    if manifest is None:
        raise ExtractionStructureError("manifest", source)
    spine = find_first_child(root, "spine")
    if spine is None:
        raise ExtractionStructureError("spine", source)

    metadata = find_first_child(root, "metadata")
    if metadata is None:
        logger.warning("Package document has no <metadata> element [%s]", source)

    package = EpubPackage(
        version=_required(root, "version"),
        unique_identifier=_required(root, "unique-identifier"),
        lang=get_attribute(root, "xml:lang"),
        dir=get_attribute(root, "dir"),
        id=get_attribute(root, "id"),
        metadata=_parse_metadata(metadata),
        manifest=_parse_manifest(manifest),
        spine=_parse_spine(spine),
        bindings=_parse_bindings(find_first_child(root, "bindings")),
    )
    logger.debug(
        "Parsed package document %s: %d manifest items, %d spine entries",
        source,
        len(package.manifest.items),
        len(package.spine.itemrefs),
    )
    return package


def parse_package_document(
    path: str | Path,
    *,
    limits: XmlDocumentLimits = DEFAULT_XML_DOCUMENT_LIMITS,
) -> EpubPackage:
    """
    Parse the package document of the unpacked EPUB at ``path``.

    The package document is located through META-INF/container.xml. When the
    container names no package document an empty EpubPackage is returned.

    Args:
        path: Root directory of an unpacked EPUB.
        limits: Size limit applied to each XML document read.

    Returns:
        EpubPackage with package attributes, metadata, manifest, spine and
        (when present) bindings.

    Raises:
        ExtractionFileNotFoundError: container.xml or the package document
            does not exist.
        ExtractionParseError: Either document is not well-formed XML.
        ExtractionStructureError: The package document has no manifest or spine.
        ExtractionFailedError: Extraction failed for any other reason.
    """
    try:
        package_path = find_package_document_path(path, limits=limits)
        if package_path is None:
            logger.warning("No package document declared in %s", path)
            return EpubPackage()

        logger.debug("Resolved package document %s", package_path)
        root = load_xml_root(package_path, limits=limits)
        return parse_package_root(root, source=package_path)
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionFailedError(
            f"Failed to parse package document in {path}", cause=exc
        ) from exc
