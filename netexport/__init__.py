"""netexport: annotated diagnostic dump export service."""

__version__ = '0.1.0'
