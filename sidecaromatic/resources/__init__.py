"""Packaged default options."""
