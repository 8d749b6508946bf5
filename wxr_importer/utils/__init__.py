"""
Utility helpers used by the import tool.

This subpackage exposes convenience functions for structured logging, file
name handling and image downloads.
"""

from .errors import ERRORS, report_error, report_ok
from .filenames import filename_from_url, is_absolute_url, sanitize_file_name
from .http import RateLimiter, download_to_temp

__all__ = [
    "ERRORS",
    "report_error",
    "report_ok",
    "filename_from_url",
    "is_absolute_url",
    "sanitize_file_name",
    "RateLimiter",
    "download_to_temp",
]
