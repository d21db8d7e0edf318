"""Disk cleanup engine: analyze and clean browser, temp, system and custom targets."""

__version__ = "0.1.0"
