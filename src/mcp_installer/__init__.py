"""MCP installer bridge.

Installs MCP servers into the host's extension configuration.
"""

__version__ = "0.1.0"
