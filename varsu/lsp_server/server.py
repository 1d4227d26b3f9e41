"""
Language server implementation for varsu.

pygls stdio server providing completion and hover for CSS custom
properties, with one schema per workspace folder.
"""

import logging
import sys
from typing import Any, Optional

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from config.defaults import DEFAULT_SETTINGS, SETTINGS_SECTION
from core import __version__
from core.models.config import GlobalSettings
from .handlers import TRIGGER_CHARACTERS, get_completions, get_hover
from .logging_handler import LanguageClientLogHandler
from .workspace import WorkspaceContext

logger = logging.getLogger(__name__)


class VarsuLanguageServer(LanguageServer):
    """
    varsu language server.

    The workspace context is created by the `initialize` request and
    loaded once the client reports `initialized`.
    """

    def __init__(self, settings: Optional[GlobalSettings] = None, *args, **kwargs):
        super().__init__("varsu", __version__, *args, **kwargs)
        self.settings = settings or GlobalSettings()
        self._context: Optional[WorkspaceContext] = None

    @property
    def context(self) -> WorkspaceContext:
        if self._context is None:
            raise RuntimeError("Workspace context is not initialized")
        return self._context

    def initialize_context(self, params: lsp.InitializeParams) -> WorkspaceContext:
        self._context = WorkspaceContext.from_initialize_params(params, settings=self.settings)
        logger.info(f"Initialized workspaces: {', '.join(self._context.workspace_uris)}")
        return self._context

    def dispose_context(self) -> None:
        if self._context is not None:
            self._context.dispose()
            self._context = None

    async def fetch_workspace_settings(self, workspace_uri: str) -> Any:
        """Request the varsu settings section scoped to a workspace"""
        result = await self.workspace_configuration_async(lsp.ConfigurationParams(items=[
            lsp.ConfigurationItem(scope_uri=workspace_uri, section=SETTINGS_SECTION)
        ]))
        return result[0] if result else None

    def document_line(self, document_uri: str, line: int) -> Optional[str]:
        document = self.workspace.get_text_document(document_uri)
        lines = document.lines
        if line >= len(lines):
            return None
        return lines[line].rstrip("\r\n")


def create_server(settings: Optional[GlobalSettings] = None) -> VarsuLanguageServer:
    """Create a server with every feature registered"""
    server = VarsuLanguageServer(settings)

    @server.feature(lsp.INITIALIZE)
    def on_initialize(params: lsp.InitializeParams):
        server.initialize_context(params)

    @server.feature(lsp.INITIALIZED)
    async def on_initialized(params: lsp.InitializedParams):
        await server.context.load(server.fetch_workspace_settings)

    @server.feature(lsp.SHUTDOWN)
    def on_shutdown(params: None):
        server.dispose_context()

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams):
        server.context.document_opened(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams):
        server.context.document_closed(params.text_document.uri)

    @server.feature(
        lsp.TEXT_DOCUMENT_COMPLETION,
        lsp.CompletionOptions(trigger_characters=TRIGGER_CHARACTERS),
    )
    def completion(params: lsp.CompletionParams) -> Optional[lsp.CompletionList]:
        uri = params.text_document.uri
        schema = server.context.schema_for_document(uri)
        line = server.document_line(uri, params.position.line)
        if schema is None or line is None:
            return None
        return get_completions(schema, line, params.position.character)

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    def hover(params: lsp.HoverParams) -> Optional[lsp.Hover]:
        uri = params.text_document.uri
        schema = server.context.schema_for_document(uri)
        line = server.document_line(uri, params.position.line)
        if schema is None or line is None:
            return None
        return get_hover(schema, line, params.position)

    return server


def configure_logging(settings: GlobalSettings) -> None:
    """Log to stderr; stdout carries the protocol"""
    level = logging.DEBUG if settings.debug_mode else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format=DEFAULT_SETTINGS['logging']['format'],
        stream=sys.stderr
    )


def start(settings: Optional[GlobalSettings] = None) -> None:
    """Run the language server over stdio"""
    settings = settings or GlobalSettings()
    configure_logging(settings)

    server = create_server(settings)
    client_handler = LanguageClientLogHandler(server)
    client_handler.setFormatter(logging.Formatter('%(name)s - %(message)s'))
    logging.getLogger().addHandler(client_handler)

    logger.info(f"Starting varsu language server v{__version__}")
    try:
        server.start_io()
    finally:
        logging.getLogger().removeHandler(client_handler)
