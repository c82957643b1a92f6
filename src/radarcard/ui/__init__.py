"""Localized card text."""
