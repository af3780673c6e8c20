"""CTest JUnit report parsing into a normalized test-result model."""

__version__ = "0.1.0"
