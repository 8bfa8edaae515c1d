"""Reflection graph — class, property and parameter reflects."""
