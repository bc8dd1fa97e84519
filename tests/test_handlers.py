"""Tests for request handlers."""

from __future__ import annotations

import pytest

from conftest import make_manager, write_package
from mcp_installer.handlers import (
    dispatch_message,
    handle_install_repo_mcp_server,
    make_error_response,
    make_result_response,
)


@pytest.fixture
def manager(store, settings):
    return make_manager(store, settings, registry_packages=["@scope/server-x"])


class TestHelpers:
    """Tests for helper functions."""

    def test_make_error_response(self):
        """Test error response creation."""
        response = make_error_response("req-123", "some_error", "Something went wrong")
        assert response["type"] == "error"
        assert response["request_id"] == "req-123"
        assert response["error"] == {"code": "some_error", "message": "Something went wrong"}

    def test_make_error_response_with_details(self):
        response = make_error_response("req-123", "some_error", "x", details={"extra": "info"})
        assert response["error"]["details"] == {"extra": "info"}

    def test_make_result_response(self):
        response = make_result_response("install_repo_mcp_server", "req-123", installed=["a"])
        assert response["type"] == "install_repo_mcp_server_result"
        assert response["request_id"] == "req-123"
        assert response["installed"] == ["a"]


class TestInstallRepoHandler:
    """Tests for install_repo_mcp_server."""

    @pytest.mark.asyncio
    async def test_success(self, manager):
        message = {
            "type": "install_repo_mcp_server",
            "request_id": "req-1",
            "name": "@scope/server-x",
            "args": ["--a"],
            "env": ["K=V"],
        }
        response = await handle_install_repo_mcp_server(message, manager)

        assert response["type"] == "install_repo_mcp_server_result"
        assert response["installed"] == ["server-x"]
        assert "npx" in response["message"]

    @pytest.mark.asyncio
    async def test_missing_name(self, manager):
        response = await handle_install_repo_mcp_server({"request_id": "r"}, manager)

        assert response["type"] == "error"
        assert response["error"]["code"] == "invalid_params"

    @pytest.mark.asyncio
    async def test_bad_args_type(self, manager, config_path):
        message = {"name": "@scope/server-x", "args": "--not-a-list"}
        response = await handle_install_repo_mcp_server(message, manager)

        assert response["error"]["code"] == "invalid_params"
        assert not config_path.exists()

    @pytest.mark.asyncio
    async def test_install_error_code(self, store, settings):
        manager = make_manager(store, settings, node=False)
        response = await handle_install_repo_mcp_server({"name": "x"}, manager)

        assert response["type"] == "error"
        assert response["error"]["code"] == "prerequisite_missing"


class TestDispatchMessage:
    """Tests for request dispatch."""

    @pytest.mark.asyncio
    async def test_dispatch_local(self, manager, tmp_dir):
        pkg = write_package(tmp_dir / "pkg", {"name": "local-srv", "main": "index.js"})
        message = {"type": "install_local_mcp_server", "request_id": "r1", "path": str(pkg)}

        response = await dispatch_message(message, manager)

        assert response["type"] == "install_local_mcp_server_result"
        assert response["installed"] == ["local-srv"]

    @pytest.mark.asyncio
    async def test_dispatch_local_missing_path_param(self, manager):
        response = await dispatch_message({"type": "install_local_mcp_server"}, manager)

        assert response["error"]["code"] == "invalid_params"

    @pytest.mark.asyncio
    async def test_dispatch_local_path_not_found(self, manager, tmp_dir):
        message = {"type": "install_local_mcp_server", "path": str(tmp_dir / "missing")}
        response = await dispatch_message(message, manager)

        assert response["type"] == "error"
        assert response["error"]["code"] == "path_not_found"

    @pytest.mark.asyncio
    async def test_dispatch_repair(self, manager):
        response = await dispatch_message({"type": "repair_installer_extension", "request_id": "r"}, manager)

        assert response["type"] == "repair_installer_extension_result"
        assert response["installed"] == ["mcp-installer"]

    @pytest.mark.asyncio
    async def test_dispatch_unknown_type(self, manager):
        response = await dispatch_message({"type": "uninstall", "request_id": "req-1"}, manager)

        assert response["type"] == "error"
        assert response["error"]["code"] == "unknown_operation"
        assert response["error"]["details"] == {"received_type": "uninstall"}

    @pytest.mark.asyncio
    async def test_dispatch_missing_type(self, manager):
        response = await dispatch_message({"request_id": "req-1"}, manager)

        assert response["type"] == "error"
        assert response["error"]["code"] == "invalid_message"
