"""Import Google Takeout saved places into a Google Maps list through the web UI."""

__version__ = '0.1.0'
