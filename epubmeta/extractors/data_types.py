import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpubRootFile:
    """A ``rootfile`` entry of META-INF/container.xml."""

    full_path: str = ""
    media_type: str = ""


@dataclass(frozen=True)
class EpubSimpleElement:
    """Dublin Core element carrying only an optional ``id``."""

    value: str = ""
    id: Optional[str] = None


@dataclass(frozen=True)
class EpubLocalizedElement:
    """Dublin Core element that also carries ``xml:lang`` and ``dir``."""

    value: str = ""
    id: Optional[str] = None
    lang: Optional[str] = None
    dir: Optional[str] = None


EpubIdentifier = EpubSimpleElement
EpubLanguage = EpubSimpleElement
EpubSource = EpubSimpleElement
EpubType = EpubSimpleElement
EpubFormat = EpubSimpleElement

EpubTitle = EpubLocalizedElement
EpubContributor = EpubLocalizedElement
EpubCreator = EpubLocalizedElement
EpubDescription = EpubLocalizedElement
EpubPublisher = EpubLocalizedElement
EpubRelation = EpubLocalizedElement
EpubRights = EpubLocalizedElement
EpubSubject = EpubLocalizedElement
EpubCoverage = EpubLocalizedElement


@dataclass(frozen=True)
class EpubMeta:
    # EPUB 3 expressions use ``property``; EPUB 2 style metas leave it empty
    property: str = ""
    value: str = ""
    refines: Optional[str] = None
    id: Optional[str] = None
    scheme: Optional[str] = None


@dataclass(frozen=True)
class EpubLink:
    href: str = ""
    rel: Optional[str] = None
    id: Optional[str] = None
    refines: Optional[str] = None
    media_type: Optional[str] = None


@dataclass(frozen=True)
class EpubMetadata:
    identifiers: Tuple[EpubIdentifier, ...] = ()
    titles: Tuple[EpubTitle, ...] = ()
    languages: Tuple[EpubLanguage, ...] = ()
    contributors: Tuple[EpubContributor, ...] = ()
    creators: Tuple[EpubCreator, ...] = ()
    date: Optional[str] = None
    source: Optional[EpubSource] = None
    epub_type: Optional[EpubType] = None
    metas: Tuple[EpubMeta, ...] = ()
    description: Optional[EpubDescription] = None
    format: Optional[EpubFormat] = None
    publisher: Optional[EpubPublisher] = None
    relation: Optional[EpubRelation] = None
    rights: Optional[EpubRights] = None
    subject: Optional[EpubSubject] = None
    coverage: Optional[EpubCoverage] = None
    links: Tuple[EpubLink, ...] = ()

    def refinements(self, element_id: str) -> Tuple[EpubMeta, ...]:
        """Return the ``meta`` expressions refining the element with ``element_id``."""
        target = f"#{element_id}"
        return tuple(meta for meta in self.metas if meta.refines == target)


@dataclass(frozen=True)
class EpubItem:
    id: str = ""
    href: str = ""
    media_type: str = ""
    fallback: Optional[str] = None
    properties: Optional[str] = None
    media_overlay: Optional[str] = None

    def has_property(self, name: str) -> bool:
        if not self.properties:
            return False
        return name in self.properties.split()


@dataclass(frozen=True)
class EpubManifest:
    items: Tuple[EpubItem, ...] = ()
    id: Optional[str] = None

    def get_item(self, item_id: str) -> Optional[EpubItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def items_with_property(self, name: str) -> Tuple[EpubItem, ...]:
        """Items whose ``properties`` list contains ``name`` (e.g. ``nav``)."""
        return tuple(item for item in self.items if item.has_property(name))

    def fallback_chain(self, item_id: str) -> Tuple[EpubItem, ...]:
        """
        Return the item with ``item_id`` followed by its fallbacks.

        The chain stops at the first dangling ``fallback`` reference or at
        the first item already visited.
        """
        chain = []
        seen = set()
        current = self.get_item(item_id)
        while current is not None and current.id not in seen:
            chain.append(current)
            seen.add(current.id)
            if current.fallback is None:
                break
            nxt = self.get_item(current.fallback)
            if nxt is None:
                logger.debug(
                    "Fallback %r of item %r is not in the manifest",
                    current.fallback,
                    current.id,
                )
            current = nxt
        return tuple(chain)


@dataclass(frozen=True)
class EpubItemref:
    idref: str = ""
    linear: Optional[str] = None
    id: Optional[str] = None
    properties: Optional[str] = None

    @property
    def is_linear(self) -> bool:
        # An absent ``linear`` attribute means "yes"
        return self.linear is None or self.linear.strip() == "yes"


@dataclass(frozen=True)
class EpubSpine:
    itemrefs: Tuple[EpubItemref, ...] = ()
    id: Optional[str] = None
    toc: Optional[str] = None
    page_progression_direction: Optional[str] = None


@dataclass(frozen=True)
class EpubMediaType:
    media_type: str = ""
    handler: str = ""


@dataclass(frozen=True)
class EpubBindings:
    media_types: Tuple[EpubMediaType, ...] = ()


@dataclass(frozen=True)
class EpubPackage:
    version: str = ""
    unique_identifier: str = ""
    lang: Optional[str] = None
    dir: Optional[str] = None
    id: Optional[str] = None
    metadata: EpubMetadata = field(default_factory=EpubMetadata)
    manifest: EpubManifest = field(default_factory=EpubManifest)
    spine: EpubSpine = field(default_factory=EpubSpine)
    bindings: Optional[EpubBindings] = None

    def reading_order(self) -> Tuple[EpubItem, ...]:
        """Manifest items in spine order. Dangling ``idref`` values are skipped."""
        items = []
        for itemref in self.spine.itemrefs:
            item = self.manifest.get_item(itemref.idref)
            if item is None:
                logger.warning(
                    "Spine itemref %r does not match any manifest item",
                    itemref.idref,
                )
                continue
            items.append(item)
        return tuple(items)

    def to_dict(self) -> dict:
        from epubmeta.extractors.serialization import serialize_extraction

        return serialize_extraction(self)
