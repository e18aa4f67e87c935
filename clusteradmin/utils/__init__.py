"""Shared utilities: logging and configuration."""
