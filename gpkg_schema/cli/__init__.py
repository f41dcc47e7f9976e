"""Command-line interface for gpkg-schema."""
