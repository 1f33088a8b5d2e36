import logging
import unittest
from pathlib import Path

import pytest

from epubmeta.exceptions import (
    ExtractionDocumentTooLargeError,
    ExtractionFileNotFoundError,
    ExtractionParseError,
)
from epubmeta.extractors.container_extractor import (
    find_package_document_path,
    list_root_files,
)
from epubmeta.extractors.data_types import EpubRootFile
from epubmeta.extractors.util.xml_tree import XmlDocumentLimits

tc = unittest.TestCase()

OPF = "application/oebps-package+xml"


def test_list_root_files_preserves_document_order(resources: Path) -> None:
    rootfiles = list_root_files(resources / "epub" / "full")

    tc.assertListEqual(
        [
            EpubRootFile(full_path="EPUB/book.pdf", media_type="application/pdf"),
            EpubRootFile(full_path="EPUB/package.opf", media_type=OPF),
            EpubRootFile(full_path="EPUB/alternate.opf", media_type=OPF),
        ],
        rootfiles,
    )


def test_list_root_files_accepts_str_path(resources: Path) -> None:
    rootfiles = list_root_files(str(resources / "epub" / "minimal"))
    tc.assertEqual(1, len(rootfiles))
    tc.assertEqual("OEBPS/content.opf", rootfiles[0].full_path)


def test_list_root_files_copies_attributes_verbatim(make_epub_dir) -> None:
    root = make_epub_dir(rootfiles=[(" OEBPS/odd name.opf ", "Application/OEBPS-Package+XML")])
    rootfiles = list_root_files(root)
    tc.assertEqual(" OEBPS/odd name.opf ", rootfiles[0].full_path)
    tc.assertEqual("Application/OEBPS-Package+XML", rootfiles[0].media_type)


def test_list_root_files_missing_attributes_are_empty(make_epub_dir) -> None:
    container = (
        '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
        "<rootfiles><rootfile/></rootfiles></container>"
    )
    rootfiles = list_root_files(make_epub_dir(container_xml=container))
    tc.assertListEqual([EpubRootFile(full_path="", media_type="")], rootfiles)


def test_list_root_files_without_rootfiles_element(make_epub_dir) -> None:
    container = '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container"/>'
    tc.assertListEqual([], list_root_files(make_epub_dir(container_xml=container)))


def test_list_root_files_missing_container(tmp_path: Path) -> None:
    with pytest.raises(ExtractionFileNotFoundError):
        list_root_files(tmp_path)


def test_list_root_files_malformed_container(make_epub_dir) -> None:
    root = make_epub_dir(container_xml="<container><rootfiles></container>")
    with pytest.raises(ExtractionParseError):
        list_root_files(root)


def test_find_package_document_path_no_candidate(resources: Path) -> None:
    tc.assertIsNone(find_package_document_path(resources / "epub" / "no_package"))


def test_find_package_document_path_no_rootfiles(make_epub_dir) -> None:
    root = make_epub_dir(rootfiles=[])
    tc.assertIsNone(find_package_document_path(root))


def test_find_package_document_path_single_candidate(resources: Path) -> None:
    directory = resources / "epub" / "minimal"
    tc.assertEqual(
        str(directory / "OEBPS" / "content.opf"),
        find_package_document_path(directory),
    )


def test_find_package_document_path_first_candidate_wins(resources: Path) -> None:
    directory = resources / "epub" / "full"
    tc.assertEqual(
        str(directory / "EPUB" / "package.opf"),
        find_package_document_path(directory),
    )


def test_find_package_document_path_requires_exact_media_type(make_epub_dir) -> None:
    root = make_epub_dir(
        rootfiles=[
            ("upper.opf", "APPLICATION/OEBPS-PACKAGE+XML"),
            ("spaced.opf", " application/oebps-package+xml"),
            ("exact.opf", OPF),
        ]
    )
    tc.assertEqual(str(root / "exact.opf"), find_package_document_path(root))


def test_find_package_document_path_absolute_full_path_stays_in_directory(make_epub_dir) -> None:
    root = make_epub_dir(rootfiles=[("/etc/hostname", OPF)])
    tc.assertEqual(str(root / "etc" / "hostname"), find_package_document_path(root))


def test_find_package_document_path_skips_entries_escaping_directory(make_epub_dir, caplog) -> None:
    root = make_epub_dir(
        rootfiles=[
            ("../outside.opf", OPF),
            ("OEBPS/../../outside.opf", OPF),
            ("OEBPS/content.opf", OPF),
        ]
    )
    with caplog.at_level(logging.WARNING):
        tc.assertEqual(str(root / "OEBPS" / "content.opf"), find_package_document_path(root))
    tc.assertIn("outside.opf", caplog.text)


def test_find_package_document_path_only_escaping_entries(make_epub_dir) -> None:
    root = make_epub_dir(rootfiles=[("../../etc/passwd", OPF)])
    tc.assertIsNone(find_package_document_path(root))


def test_list_root_files_applies_custom_limits(resources: Path) -> None:
    with pytest.raises(ExtractionDocumentTooLargeError):
        list_root_files(resources / "epub" / "minimal", limits=XmlDocumentLimits(max_document_bytes=10))
