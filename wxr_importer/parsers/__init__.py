"""
HTML and image helpers used by the import pipeline.

:mod:`wxr_importer.parsers.html_fragment` loads and serializes post bodies;
:mod:`wxr_importer.parsers.images` validates downloaded image files.
"""

from .html_fragment import inner_html, load_fragment, strip_all_tags, tidy
from .images import ImageCheck, ImageFailure, check_image, proper_image_extension

__all__ = [
    "inner_html",
    "load_fragment",
    "strip_all_tags",
    "tidy",
    "ImageCheck",
    "ImageFailure",
    "check_image",
    "proper_image_extension",
]
