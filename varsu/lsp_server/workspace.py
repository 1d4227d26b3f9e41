"""
Workspace context for the language server.

Holds one CssSchema per workspace folder, loads their settings from the
editor and answers which schema serves a given document.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from config.loader import ConfigurationError, ConfigurationLoader, SettingsFetcher
from core.models.config import GlobalSettings
from core.schema.css_schema import CssSchema
from core.source.fetcher import RemoteSourceFetcher
from .uri_mapper import UriMapper

logger = logging.getLogger(__name__)


def workspace_uris_from_params(params: Any) -> List[str]:
    """
    Workspace URIs announced by an `initialize` request.

    Uses workspace folders, else `rootUri`, else `rootPath`.

    Raises:
        ConfigurationError: no workspace was announced
    """
    folders = getattr(params, "workspace_folders", None)
    if folders:
        return [folder.uri for folder in folders]

    root_uri = getattr(params, "root_uri", None)
    if root_uri:
        return [root_uri]

    root_path = getattr(params, "root_path", None)
    if root_path:
        return [Path(root_path).resolve().as_uri()]

    raise ConfigurationError("Workspace is not defined: no workspace folders, rootUri or rootPath")


class WorkspaceContext:
    """
    Per-workspace schemas for an editor session.

    Schemas are published as soon as their settings validate; each one
    then downloads its stylesheet in a background task, so queries return
    empty results until that task finishes.
    """

    def __init__(
        self,
        workspace_uris: List[str],
        settings: Optional[GlobalSettings] = None,
        loader: Optional[ConfigurationLoader] = None
    ):
        self.settings = settings or GlobalSettings()
        self.workspace_uris = list(workspace_uris)
        self.loader = loader or ConfigurationLoader()
        self.uri_mapper = UriMapper(self.workspace_uris, lifetime=self.settings.uri_mapping_lifetime)

        self.schemas: Dict[str, CssSchema] = {}
        self.failures: Dict[str, Exception] = {}
        self._load_tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_initialize_params(
        cls,
        params: Any,
        settings: Optional[GlobalSettings] = None
    ) -> "WorkspaceContext":
        return cls(workspace_uris_from_params(params), settings=settings)

    async def load(self, fetch_settings: SettingsFetcher) -> None:
        """
        Load settings for every workspace and start schema downloads.

        Args:
            fetch_settings: Coroutine function returning a workspace's raw settings
        """
        configs, failures = await self.loader.load_many(fetch_settings, self.workspace_uris)
        self.failures = failures

        for workspace_uri, config in configs.items():
            schema = CssSchema(config, fetcher=RemoteSourceFetcher(self.settings.fetch_config))
            self.schemas[workspace_uri] = schema

            task = asyncio.create_task(schema.load())
            self._load_tasks.add(task)
            task.add_done_callback(self._load_tasks.discard)

        logger.info(
            f"Workspace context ready: {len(self.schemas)} schemas, "
            f"{len(failures)} failed configurations"
        )

    async def wait_until_loaded(self) -> None:
        """Wait for background schema downloads started by `load`"""
        if self._load_tasks:
            await asyncio.gather(*self._load_tasks)

    def document_opened(self, document_uri: str) -> Optional[str]:
        return self.uri_mapper.open(document_uri)

    def document_closed(self, document_uri: str) -> None:
        self.uri_mapper.close(document_uri)

    def schema_for_document(self, document_uri: str) -> Optional[CssSchema]:
        """Schema of the workspace owning the document, if any"""
        workspace_uri = self.uri_mapper.get_workspace(document_uri)
        if workspace_uri is None:
            return None
        return self.schemas.get(workspace_uri)

    def dispose(self) -> None:
        for task in self._load_tasks:
            task.cancel()
        self._load_tasks.clear()
        self.uri_mapper.dispose()
