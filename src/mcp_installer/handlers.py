"""Request handlers for installation operations.

Each handler processes one operation type and returns a response dict.
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Any, Optional

from mcp_installer.errors import UnknownOperation
from mcp_installer.installer import InstallManager, InstallOutcome, get_install_manager

logger = logging.getLogger(__name__)

# Type alias for request handlers
RequestHandler = Callable[[dict[str, Any], InstallManager], Coroutine[Any, Any, dict[str, Any]]]


def make_error_response(
    request_id: str,
    code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    """Create a standardized error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {
        "type": "error",
        "request_id": request_id,
        "error": error,
    }


def make_result_response(
    request_type: str,
    request_id: str,
    **kwargs: Any,
) -> dict[str, Any]:
    """Create a standardized result response."""
    return {
        "type": f"{request_type}_result",
        "request_id": request_id,
        **kwargs,
    }


def _outcome_response(request_type: str, request_id: str, outcome: InstallOutcome) -> dict[str, Any]:
    if outcome.is_error:
        return make_error_response(request_id, outcome.code or "install_error", outcome.message)
    return make_result_response(
        request_type,
        request_id,
        message=outcome.message,
        installed=outcome.installed,
    )


def _string_list(message: dict[str, Any], key: str) -> Optional[list[str]]:
    """Optional list-of-strings parameter; raises ValueError if malformed."""
    value = message.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Invalid '{key}' parameter: expected a list of strings")
    return value


async def handle_install_repo_mcp_server(message: dict[str, Any], manager: InstallManager) -> dict[str, Any]:
    """Install an MCP server from npm or PyPI."""
    request_id = message.get("request_id", "")
    name = message.get("name")

    if not name or not isinstance(name, str) or not name.strip():
        return make_error_response(
            request_id,
            "invalid_params",
            "Missing or invalid 'name' parameter",
        )

    try:
        args = _string_list(message, "args")
        env = _string_list(message, "env")
    except ValueError as e:
        return make_error_response(request_id, "invalid_params", str(e))

    outcome = await manager.install_from_registry(name, args=args, env=env)
    return _outcome_response("install_repo_mcp_server", request_id, outcome)


async def handle_install_local_mcp_server(message: dict[str, Any], manager: InstallManager) -> dict[str, Any]:
    """Install an MCP server from a local directory."""
    request_id = message.get("request_id", "")
    path = message.get("path")

    if not path or not isinstance(path, str):
        return make_error_response(
            request_id,
            "invalid_params",
            "Missing or invalid 'path' parameter",
        )

    try:
        args = _string_list(message, "args")
        env = _string_list(message, "env")
    except ValueError as e:
        return make_error_response(request_id, "invalid_params", str(e))

    outcome = await manager.install_from_local(path, args=args, env=env)
    return _outcome_response("install_local_mcp_server", request_id, outcome)


async def handle_repair_installer_extension(message: dict[str, Any], manager: InstallManager) -> dict[str, Any]:
    """Rewrite the installer's own extension entry."""
    request_id = message.get("request_id", "")
    outcome = await manager.repair_installer_extension()
    return _outcome_response("repair_installer_extension", request_id, outcome)


# Handler registry
HANDLERS: dict[str, RequestHandler] = {
    "install_repo_mcp_server": handle_install_repo_mcp_server,
    "install_local_mcp_server": handle_install_local_mcp_server,
    "repair_installer_extension": handle_repair_installer_extension,
}


async def dispatch_message(
    message: dict[str, Any],
    manager: Optional[InstallManager] = None,
) -> dict[str, Any]:
    """Dispatch a request to the appropriate handler."""
    message_type = message.get("type")
    request_id = message.get("request_id", "")

    if not message_type:
        return make_error_response(
            request_id,
            "invalid_message",
            "Missing 'type' field in message",
        )

    handler = HANDLERS.get(message_type)
    if not handler:
        error = UnknownOperation(f"Unknown operation: {message_type}")
        return make_error_response(
            request_id,
            error.code,
            str(error),
            details={"received_type": message_type},
        )

    logger.debug(f"Dispatching {message_type} (request_id={request_id})")
    return await handler(message, manager or get_install_manager())
