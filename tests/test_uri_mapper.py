"""
Unit tests for document to workspace URI mapping.
"""

import asyncio
from unittest.mock import Mock

import pytest

from varsu.lsp_server.uri_mapper import UriMapper

WORKSPACES = ["file:///repo", "file:///repo/packages/web", "file:///other"]


class TestFindWorkspace:
    """Test workspace lookup"""

    def setup_method(self):
        """Setup test instance"""
        self.mapper = UriMapper(WORKSPACES, loop=Mock())

    def test_longest_workspace_wins(self):
        """Test nested workspaces take precedence"""
        assert self.mapper.find_workspace("file:///repo/packages/web/a.css") == "file:///repo/packages/web"
        assert self.mapper.find_workspace("file:///repo/packages/api/a.css") == "file:///repo"

    def test_prefix_must_end_at_path_boundary(self):
        """Test sibling directories sharing a prefix do not match"""
        assert self.mapper.find_workspace("file:///repository/a.css") is None

    def test_trailing_slash_workspace(self):
        """Test workspace URIs with a trailing slash"""
        mapper = UriMapper(["file:///repo/"], loop=Mock())

        assert mapper.find_workspace("file:///repo/a.css") == "file:///repo/"

    def test_unknown_document(self):
        """Test documents outside every workspace"""
        assert self.mapper.get_workspace("untitled:Untitled-1") is None


class TestEviction:
    """Test delayed eviction of closed documents"""

    def setup_method(self):
        """Setup test instance with a fake loop"""
        self.loop = Mock()
        self.mapper = UriMapper(WORKSPACES, lifetime=1800.0, loop=self.loop)
        self.uri = "file:///repo/a.css"

    def test_close_schedules_eviction(self):
        """Test closing schedules eviction after the lifetime"""
        self.mapper.open(self.uri)
        self.mapper.close(self.uri)

        self.loop.call_later.assert_called_once()
        delay, callback, uri = self.loop.call_later.call_args[0]
        assert delay == 1800.0
        assert uri == self.uri

        assert self.mapper.is_mapped(self.uri)
        callback(uri)
        assert not self.mapper.is_mapped(self.uri)

    def test_reopen_cancels_eviction(self):
        """Test opening again cancels the pending eviction"""
        handle = Mock()
        self.loop.call_later.return_value = handle

        self.mapper.open(self.uri)
        self.mapper.close(self.uri)
        self.mapper.open(self.uri)

        handle.cancel.assert_called_once()
        assert self.mapper.is_mapped(self.uri)

    def test_close_unmapped_document(self):
        """Test closing a never mapped document is a no-op"""
        self.mapper.close("file:///repo/never-opened.css")

        self.loop.call_later.assert_not_called()

    def test_dispose(self):
        """Test dispose cancels timers and clears mappings"""
        handle = Mock()
        self.loop.call_later.return_value = handle
        self.mapper.open(self.uri)
        self.mapper.close(self.uri)

        self.mapper.dispose()

        handle.cancel.assert_called_once()
        assert not self.mapper.is_mapped(self.uri)

    @pytest.mark.asyncio
    async def test_eviction_on_running_loop(self):
        """Test eviction with the real event loop"""
        mapper = UriMapper(WORKSPACES, lifetime=0.01)
        mapper.open(self.uri)

        mapper.close(self.uri)
        assert mapper.is_mapped(self.uri)

        await asyncio.sleep(0.05)
        assert not mapper.is_mapped(self.uri)
