"""Command-line interface for browsing the catalog."""
