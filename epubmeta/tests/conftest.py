from pathlib import Path
from typing import Callable

import pytest

RESOURCES = Path(__file__).parent / "resources"

CONTAINER_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
{rootfiles}
  </rootfiles>
</container>
"""


def _rootfile(full_path: str, media_type: str) -> str:
    return f'    <rootfile full-path="{full_path}" media-type="{media_type}"/>'


@pytest.fixture
def resources() -> Path:
    return RESOURCES


@pytest.fixture
def make_epub_dir(tmp_path: Path) -> Callable[..., Path]:
    """Build an unpacked EPUB directory with a container and an optional package document."""

    def _make(
        package_xml: str | None = None,
        *,
        package_path: str = "OEBPS/content.opf",
        rootfiles: list[tuple[str, str]] | None = None,
        container_xml: str | None = None,
    ) -> Path:
        root = tmp_path / "book"
        (root / "META-INF").mkdir(parents=True)
        if container_xml is None:
            if rootfiles is None:
                rootfiles = [(package_path, "application/oebps-package+xml")]
            container_xml = CONTAINER_TEMPLATE.format(
                rootfiles="\n".join(_rootfile(p, m) for p, m in rootfiles)
            )
        (root / "META-INF" / "container.xml").write_text(container_xml, encoding="utf-8")
        if package_xml is not None:
            target = root / package_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(package_xml, encoding="utf-8")
        return root

    return _make
