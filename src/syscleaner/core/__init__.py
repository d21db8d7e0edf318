"""Scan/clean engine internals."""
