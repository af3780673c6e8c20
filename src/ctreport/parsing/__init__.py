"""Decoders for raw test report documents."""
