"""
Language server package for varsu.

Serves completion and hover for CSS custom properties over stdio.

Key Components:
- server.py: pygls language server and feature registration
- workspace.py: per-workspace schemas and settings loading
- uri_mapper.py: document to workspace mapping with delayed eviction
- handlers.py: completion and hover payloads
- logging_handler.py: forwards log records to the editor
"""

from .server import VarsuLanguageServer, create_server, start

__all__ = ["VarsuLanguageServer", "create_server", "start"]
