"""
traefik-hub MCP Server Package.

This package provides the Model Context Protocol (MCP) server for a local
Traefik stack, enabling AI assistants to inspect routing, manage containers,
edit middlewares and run the stack health check.
"""

__version__ = "0.1.0"
__description__ = "MCP server for a local Traefik reverse-proxy stack"
