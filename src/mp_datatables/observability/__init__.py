"""Observability – logging configuration."""
