"""Command-line tools for castplayback."""
