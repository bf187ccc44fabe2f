"""Terminal front-end for form sessions."""

from .app import app
from .interactive import FormRunner
from .render import Renderer

__all__ = [
    "FormRunner",
    "Renderer",
    "app",
]
