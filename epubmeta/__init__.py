"""
epubmeta: Metadata extraction for unpacked EPUB 3 publications.

Reads META-INF/container.xml to locate the OPF package document and maps its
metadata, manifest, spine and bindings onto frozen dataclasses. Archive
unpacking, rendering and schema validation are left to other tools.
"""

from epubmeta.exceptions import (
    ExtractionDocumentTooLargeError,
    ExtractionError,
    ExtractionFailedError,
    ExtractionFileNotFoundError,
    ExtractionParseError,
    ExtractionStructureError,
)
from epubmeta.extractors.container_extractor import (
    find_package_document_path,
    list_root_files,
)
from epubmeta.extractors.data_types import (
    EpubBindings,
    EpubContributor,
    EpubCoverage,
    EpubCreator,
    EpubDescription,
    EpubFormat,
    EpubIdentifier,
    EpubItem,
    EpubItemref,
    EpubLanguage,
    EpubLink,
    EpubLocalizedElement,
    EpubManifest,
    EpubMediaType,
    EpubMeta,
    EpubMetadata,
    EpubPackage,
    EpubPublisher,
    EpubRelation,
    EpubRights,
    EpubRootFile,
    EpubSimpleElement,
    EpubSource,
    EpubSpine,
    EpubSubject,
    EpubTitle,
    EpubType,
)
from epubmeta.extractors.package_extractor import parse_package_document
from epubmeta.extractors.util.xml_tree import (
    DEFAULT_XML_DOCUMENT_LIMITS,
    XmlDocumentLimits,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Main functions
    "list_root_files",
    "find_package_document_path",
    "parse_package_document",
    # Configuration
    "XmlDocumentLimits",
    "DEFAULT_XML_DOCUMENT_LIMITS",
    # Records
    "EpubRootFile",
    "EpubSimpleElement",
    "EpubLocalizedElement",
    "EpubIdentifier",
    "EpubLanguage",
    "EpubSource",
    "EpubType",
    "EpubFormat",
    "EpubTitle",
    "EpubContributor",
    "EpubCreator",
    "EpubDescription",
    "EpubPublisher",
    "EpubRelation",
    "EpubRights",
    "EpubSubject",
    "EpubCoverage",
    "EpubMeta",
    "EpubLink",
    "EpubMetadata",
    "EpubItem",
    "EpubManifest",
    "EpubItemref",
    "EpubSpine",
    "EpubMediaType",
    "EpubBindings",
    "EpubPackage",
    # Errors
    "ExtractionError",
    "ExtractionFailedError",
    "ExtractionFileNotFoundError",
    "ExtractionParseError",
    "ExtractionStructureError",
    "ExtractionDocumentTooLargeError",
]
