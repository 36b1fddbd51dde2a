"""Bundled data files for astroframes."""
