"""Core services: history persistence and candidate gathering."""
