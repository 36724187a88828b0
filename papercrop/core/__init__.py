"""Image I/O and pixel utilities."""
