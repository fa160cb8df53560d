"""Core operations for the Traefik stack."""
