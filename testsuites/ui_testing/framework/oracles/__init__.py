"""
================================================================================
Oracles
================================================================================

Business invariants of the clinic application as executable assertions.
Each oracle raises AssertionFailure on a mismatch.

Components:
    - csv_oracle: owner CSV export (filename, header, fields, filtering)
    - locale_oracle: language selection and its persistence across links
    - duplicate_oracle: duplicate-owner prevention
    - not_found_oracle: graceful 404 for missing owners and pets

Author: Automation Team
License: MIT
================================================================================
"""

from .csv_oracle import (
    EXPORT_HEADER,
    CsvExport,
    CsvExportOracle,
    assert_export_excludes,
    assert_export_filename,
    assert_export_link,
    assert_export_structure,
    assert_export_superset,
    assert_filtered_export,
    parse_export,
    split_csv_line,
)
from .duplicate_oracle import DuplicateOracle, find_duplicate, is_duplicate
from .locale_oracle import LocaleOracle
from .not_found_oracle import NotFoundOracle, find_leaks

__all__ = [
    "EXPORT_HEADER",
    "CsvExport",
    "CsvExportOracle",
    "assert_export_excludes",
    "assert_export_filename",
    "assert_export_link",
    "assert_export_structure",
    "assert_export_superset",
    "assert_filtered_export",
    "parse_export",
    "split_csv_line",
    "DuplicateOracle",
    "find_duplicate",
    "is_duplicate",
    "LocaleOracle",
    "NotFoundOracle",
    "find_leaks",
]
