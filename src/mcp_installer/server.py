"""MCP server exposing the installer operations as tools."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from mcp_installer.handlers import dispatch_message

mcp = FastMCP("mcp-installer")


async def _run(message: Dict[str, Any]) -> str:
    response = await dispatch_message(message)
    if response.get("type") == "error":
        raise ToolError(response["error"]["message"])
    return response["message"]


@mcp.tool
async def install_repo_mcp_server(
    name: str,
    args: Optional[List[str]] = None,
    env: Optional[List[str]] = None,
) -> str:
    """Install an MCP server from npm (run with npx) or PyPI (run with uvx).

    Args:
        name: Package name, e.g. "@modelcontextprotocol/server-github" or "mcp-server-fetch"
        args: Arguments to pass to the server on startup
        env: Environment variables for the server, each as "KEY=VALUE"
    """
    return await _run({"type": "install_repo_mcp_server", "name": name, "args": args, "env": env})


@mcp.tool
async def install_local_mcp_server(
    path: str,
    args: Optional[List[str]] = None,
    env: Optional[List[str]] = None,
) -> str:
    """Install an MCP server from a local directory containing a package.json.

    Args:
        path: Absolute path to the server's directory
        args: Arguments to pass to the server on startup
        env: Environment variables for the server, each as "KEY=VALUE"
    """
    return await _run({"type": "install_local_mcp_server", "path": path, "args": args, "env": env})


@mcp.tool
async def repair_installer_extension() -> str:
    """Restore this installer's own entry in the host configuration."""
    return await _run({"type": "repair_installer_extension"})
