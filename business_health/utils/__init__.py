"""Shared utilities: configuration, logging, errors and input handling."""
