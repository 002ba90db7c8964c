"""HTML export of lab outcomes."""

from ._site import generate_site
from .html import render_lab_html

__all__ = ["generate_site", "render_lab_html"]
