"""
================================================================================
Clinic Tools
================================================================================

Supporting utilities shared by the clinic E2E test suites.

Modules:
    - common: Logging setup and filesystem helpers
    - report_tools: Allure attachment helpers for screenshots, traces and downloads

Example:
    from clinic_tools.common import init_logger
    from clinic_tools.report_tools.allure_utils import attach_file

    init_logger(level="DEBUG")
    attach_file(path, name="owners.csv", content_type="text/csv")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
