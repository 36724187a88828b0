"""papercrop: locate the sheet of paper in a photo and crop to it."""

__version__ = "0.1.0"
