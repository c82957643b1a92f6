"""Polar radar display of geolocated entities and user markers."""

__version__ = "0.3.0"
