"""
================================================================================
CSV Export Oracle
================================================================================

Checks for the owner CSV export (`/owners.csv`):

    1. download listener armed before the export click (DownloadCapture)
    2. filename is owners-export-YYYY-MM-DD.csv
    3. header is exactly "First Name,Last Name,Address,City,Telephone"
    4. every record has 5 fields, quoted fields (RFC 4180) included
    5. a filtered export only holds rows with the filter last name
    6. an unfiltered export holds every seeded owner

Parsing is pure and runs without a browser.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

import allure
from loguru import logger

from clinic_tools.report_tools.allure_utils import attach_json

from ..downloads import DownloadArtifact, DownloadCapture
from .base import check

if TYPE_CHECKING:
    from testsuites.ui_testing.pages.owner_page import OwnerPage


EXPORT_COLUMNS: Tuple[str, ...] = ("First Name", "Last Name", "Address", "City", "Telephone")
EXPORT_HEADER = ",".join(EXPORT_COLUMNS)
FILENAME_PATTERN = re.compile(r"^owners-export-(\d{4})-(\d{2})-(\d{2})\.csv$")


@dataclass(frozen=True)
class ExportRow:
    first_name: str
    last_name: str
    address: str
    city: str
    telephone: str

    @property
    def name(self) -> Tuple[str, str]:
        return (self.first_name, self.last_name)


@dataclass
class CsvExport:
    """
    Parsed export file.

    Attributes:
        header: Fields of the first record
        raw_header: First non-blank line exactly as written, before CSV parsing
        rows: Well-formed data records
        malformed: (record number, fields) of records without 5 fields
        artifact: The download the content came from, when there was one
    """
    header: List[str]
    rows: List[ExportRow] = field(default_factory=list)
    malformed: List[Tuple[int, List[str]]] = field(default_factory=list)
    artifact: Optional[DownloadArtifact] = None
    raw_header: Optional[str] = None

    @property
    def last_names(self) -> List[str]:
        return [row.last_name for row in self.rows]

    def names(self) -> List[Tuple[str, str]]:
        return [row.name for row in self.rows]


def split_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into fields, honoring double-quoted fields.

    >>> split_csv_line('Jane,"Doe, Jr.","1 Main St, Apt 2",Madison,5551234567')
    ['Jane', 'Doe, Jr.', '1 Main St, Apt 2', 'Madison', '5551234567']
    """
    return next(csv.reader([line]), [])


def parse_export(content: str) -> CsvExport:
    """
    Parse export content. Quoted fields may contain commas, doubled quotes
    and newlines. Blank records are skipped.
    """
    records = [record for record in csv.reader(io.StringIO(content)) if any(f.strip() for f in record)]
    if not records:
        return CsvExport(header=[])

    raw_header = next((line.rstrip("\r") for line in content.split("\n") if line.strip()), None)
    export = CsvExport(header=records[0], raw_header=raw_header)
    for number, record in enumerate(records[1:], start=1):
        if len(record) != len(EXPORT_COLUMNS):
            export.malformed.append((number, record))
            continue
        export.rows.append(ExportRow(*record))
    return export


def export_summary(export: CsvExport) -> Dict[str, Any]:
    """Report-friendly digest of a parsed export."""
    return {
        "filename": export.artifact.filename if export.artifact else None,
        "header": export.raw_header,
        "rows": len(export.rows),
        "last_names": sorted(set(export.last_names)),
        "malformed": [number for number, _ in export.malformed],
    }


def filename_date(filename: str) -> Optional[date]:
    """Date embedded in an export filename, or None if the name is off-pattern."""
    match = FILENAME_PATTERN.match(filename)
    if not match:
        return None
    try:
        return date(*(int(part) for part in match.groups()))
    except ValueError:
        return None


# ================================================================================
# Assertions
# ================================================================================

def assert_export_filename(filename: str) -> None:
    check(
        filename_date(filename) is not None,
        f"Export filename {filename!r} does not match owners-export-YYYY-MM-DD.csv",
    )


def assert_export_structure(export: CsvExport) -> None:
    """Exact header line (quoting included), then 5 fields per record."""
    check(
        export.header == list(EXPORT_COLUMNS),
        f"CSV header mismatch: expected {EXPORT_HEADER!r}, got {','.join(export.header)!r}",
    )
    if export.raw_header is not None:
        check(
            export.raw_header == EXPORT_HEADER,
            f"CSV header mismatch: expected first line {EXPORT_HEADER!r}, got {export.raw_header!r}",
        )
    check(
        not export.malformed,
        "CSV records without 5 fields: "
        + "; ".join(f"#{number}: {fields}" for number, fields in export.malformed),
    )


def assert_filtered_export(
    export: CsvExport,
    last_name: str,
    expected_count: Optional[int] = None,
    require_rows: bool = False,
) -> None:
    """
    Every row carries `last_name` exactly. An export without rows passes
    unless `require_rows` is set; `expected_count` pins the row count.
    """
    if require_rows:
        check(bool(export.rows), f"Filtered export for {last_name!r} has no data rows")
    strangers = [row for row in export.rows if row.last_name != last_name]
    check(
        not strangers,
        f"Filtered export for {last_name!r} contains other owners: "
        + ", ".join(f"{row.first_name} {row.last_name}" for row in strangers),
    )
    if expected_count is not None:
        check(
            len(export.rows) == expected_count,
            f"Expected {expected_count} {last_name!r} rows, got {len(export.rows)}",
        )


def assert_export_excludes(export: CsvExport, last_name: str) -> None:
    present = [row for row in export.rows if row.last_name == last_name]
    check(not present, f"Export unexpectedly contains {len(present)} {last_name!r} row(s)")


def assert_export_superset(export: CsvExport, known_owners: Iterable[Tuple[str, str]]) -> None:
    """Every (first, last) of `known_owners` appears in the export."""
    exported = set(export.names())
    missing = [f"{first} {last}" for first, last in known_owners if (first, last) not in exported]
    check(not missing, f"Unfiltered export is missing known owners: {', '.join(missing)}")


def assert_export_link(href: str, last_name: Optional[str]) -> None:
    """The export href targets owners.csv and carries the active filter."""
    check("owners.csv" in href, f"Export link {href!r} does not target owners.csv")
    if last_name:
        check(f"lastName={last_name}" in href, f"Export link {href!r} lacks lastName={last_name}")


# ================================================================================
# Oracle
# ================================================================================

class CsvExportOracle:
    """
    Downloads the export from an owner list and checks it.

    Usage:
        oracle = CsvExportOracle(download_capture)
        export = await oracle.download(owner_page)
        assert_filtered_export(export, "Davis")
    """

    def __init__(self, capture: DownloadCapture):
        self.capture = capture

    async def download(self, owner_page: "OwnerPage") -> CsvExport:
        """
        Click "Export to CSV" with the listener armed first, then verify
        filename and structure.

        Raises:
            DownloadTimeout: No file arrived
            AssertionFailure: Filename or structure is wrong
        """
        with allure.step("Download owners CSV export"):
            link = await owner_page.smart.locate("export_csv_link", timeout=owner_page.element_timeout)
            href = await link.get_attribute("href") or ""
            assert_export_link(href, None)

            artifact = await self.capture.capture(link.click, content_type="text/csv")
            assert_export_filename(artifact.filename)

            export = parse_export(artifact.content)
            export.artifact = artifact
            attach_json(export_summary(export), name="Export summary")
            assert_export_structure(export)
            logger.info(f"Export {artifact.filename}: {len(export.rows)} rows")
            return export


__all__ = [
    "EXPORT_COLUMNS",
    "EXPORT_HEADER",
    "FILENAME_PATTERN",
    "ExportRow",
    "CsvExport",
    "CsvExportOracle",
    "split_csv_line",
    "parse_export",
    "filename_date",
    "export_summary",
    "assert_export_filename",
    "assert_export_structure",
    "assert_filtered_export",
    "assert_export_excludes",
    "assert_export_superset",
    "assert_export_link",
]
