"""
Shared test infrastructure.

Modules:
- file_utils: writing template files and config documents
- rendering_utils: engine construction, rendering shortcuts, sample filters
"""

from .file_utils import write, write_templates, write_yaml
from .rendering_utils import date_format, eq_filter, make_engine, render_template

__all__ = [
    # File utilities
    "write", "write_templates", "write_yaml",

    # Rendering utilities
    "make_engine", "render_template", "eq_filter", "date_format",
]
