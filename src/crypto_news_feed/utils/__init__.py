"""Utility helpers for crypto news feed."""
