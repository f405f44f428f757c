"""Command-line interface for search-scout."""
