"""Bundled demo story content."""
