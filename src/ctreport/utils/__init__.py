"""Utility helpers for report parsing."""
