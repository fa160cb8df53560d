"""
traefik-hub: tooling for a local Traefik reverse-proxy stack.

Core library behind the traefik-hub MCP server and CLI: Docker and Traefik
API access, dynamic middleware editing and the stack health check.
"""

__version__ = "0.1.0"
