"""Shared models and math for radarcard."""
