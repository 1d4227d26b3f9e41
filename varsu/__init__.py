"""
varsu - completion and hover for CSS custom properties across themes.

Command-line interface and language server built on the core schema.
"""

from core import __version__

__all__ = ["__version__"]
