"""Validation and console output helpers for the lending CLI."""
