"""
OCF Container Locator
=====================

Reads ``META-INF/container.xml`` of an unpacked EPUB directory and reports
the ``rootfile`` entries it declares::

    <container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
      <rootfiles>
        <rootfile full-path="OEBPS/content.opf"
                  media-type="application/oebps-package+xml"/>
      </rootfiles>
    </container>

A container may list several rootfiles (alternate renditions). The package
document is the first one whose media type is
``application/oebps-package+xml``.
"""

import logging
from pathlib import Path
from typing import List, Optional

from epubmeta.extractors.data_types import EpubRootFile
from epubmeta.extractors.util.xml_tree import (
    DEFAULT_XML_DOCUMENT_LIMITS,
    XmlDocumentLimits,
    find_all_children,
    find_first_child,
    get_attribute,
    load_xml_root,
)

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
PACKAGE_DOCUMENT_MEDIA_TYPE = "application/oebps-package+xml"


def list_root_files(
    path: str | Path,
    *,
    limits: XmlDocumentLimits = DEFAULT_XML_DOCUMENT_LIMITS,
) -> List[EpubRootFile]:
    """
    Return the ``rootfile`` entries of the container document in document order.

    Args:
        path: Root directory of an unpacked EPUB.
        limits: Size limit applied to container.xml.

    Raises:
        ExtractionFileNotFoundError: container.xml does not exist.
        ExtractionParseError: container.xml is not well-formed XML.
    """
    root = load_xml_root(Path(path) / CONTAINER_PATH, limits=limits)

    rootfiles = find_first_child(root, "rootfiles")
    if rootfiles is None:
        logger.warning("No <rootfiles> element in %s", Path(path) / CONTAINER_PATH)
        return []

    result = [
        EpubRootFile(
            full_path=get_attribute(node, "full-path") or "",
            media_type=get_attribute(node, "media-type") or "",
        )
        for node in find_all_children(rootfiles, "rootfile")
    ]
    logger.debug("Found %d rootfile entries in %s", len(result), path)
    return result


def find_package_document_path(
    path: str | Path,
    *,
    limits: XmlDocumentLimits = DEFAULT_XML_DOCUMENT_LIMITS,
) -> Optional[str]:
    """
    Return the location of the OPF package document, or None if there is none.

    The returned path is the rootfile's ``full-path`` joined under ``path``.
    ``full-path`` is relative to the container root, so a leading ``/`` is
    dropped. Entries that resolve outside ``path`` are skipped.
    """
    directory = Path(path)
    base = directory.resolve()
    for rootfile in list_root_files(path, limits=limits):
        if rootfile.media_type != PACKAGE_DOCUMENT_MEDIA_TYPE:
            continue
        candidate = directory / rootfile.full_path.lstrip("/")
        if not candidate.resolve().is_relative_to(base):
            logger.warning(
                "Ignoring rootfile %r outside of %s", rootfile.full_path, directory
            )
            continue
        return str(candidate)
    return None
