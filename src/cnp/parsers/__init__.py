"""Parsers for package.json and the supported lockfile formats."""
