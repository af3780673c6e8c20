"""Output reporters for parsed test results."""
