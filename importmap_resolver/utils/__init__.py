"""Utility helpers for the importmap CLI."""
