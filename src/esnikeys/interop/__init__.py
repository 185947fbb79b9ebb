"""Command-line inspection and text transport helpers."""
