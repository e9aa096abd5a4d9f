"""deepscan.utils – shared utilities."""
