"""
CLI (Command Line Interface) for the HTML Visibility Analyzer.

This is a thin wrapper around the core engine. All business logic lives
in the engine package so it stays reusable from other callers.
"""
