"""
Document to workspace URI mapping.

A document belongs to the longest workspace URI containing it. Mappings are
cached while a document is open and evicted a while after it closes.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


def _contains(workspace_uri: str, document_uri: str) -> bool:
    root = workspace_uri.rstrip("/")
    return document_uri == root or document_uri.startswith(root + "/")


class UriMapper:
    """Maps document URIs to the workspace URI that owns them"""

    def __init__(
        self,
        workspace_uris: Iterable[str],
        lifetime: float = 1800.0,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ):
        # Longest first so nested workspaces win
        self.workspace_uris: List[str] = sorted(set(workspace_uris), key=len, reverse=True)
        self.lifetime = lifetime
        self._loop = loop

        self._mapping: Dict[str, Optional[str]] = {}
        self._evictions: Dict[str, asyncio.TimerHandle] = {}

    def find_workspace(self, document_uri: str) -> Optional[str]:
        """Longest workspace URI containing the document, uncached"""
        for workspace_uri in self.workspace_uris:
            if _contains(workspace_uri, document_uri):
                return workspace_uri
        return None

    def get_workspace(self, document_uri: str) -> Optional[str]:
        """Cached lookup; computes and stores the mapping on first use"""
        if document_uri not in self._mapping:
            self._mapping[document_uri] = self.find_workspace(document_uri)
        return self._mapping[document_uri]

    def open(self, document_uri: str) -> Optional[str]:
        """Map a document and cancel any pending eviction"""
        handle = self._evictions.pop(document_uri, None)
        if handle is not None:
            handle.cancel()
        return self.get_workspace(document_uri)

    def close(self, document_uri: str) -> None:
        """Schedule the document's mapping for eviction"""
        if document_uri not in self._mapping:
            return

        handle = self._evictions.pop(document_uri, None)
        if handle is not None:
            handle.cancel()

        loop = self._loop or asyncio.get_running_loop()
        self._evictions[document_uri] = loop.call_later(self.lifetime, self._evict, document_uri)

    def is_mapped(self, document_uri: str) -> bool:
        return document_uri in self._mapping

    def _evict(self, document_uri: str) -> None:
        self._evictions.pop(document_uri, None)
        self._mapping.pop(document_uri, None)
        logger.debug(f"Evicted workspace mapping for {document_uri}")

    def dispose(self) -> None:
        """Cancel pending evictions and drop every mapping"""
        for handle in self._evictions.values():
            handle.cancel()
        self._evictions.clear()
        self._mapping.clear()
