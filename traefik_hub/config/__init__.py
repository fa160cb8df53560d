"""Configuration constants for traefik-hub."""
