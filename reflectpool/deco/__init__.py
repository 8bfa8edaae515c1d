"""Decorator model — identifiers, their attachment instances and aliases."""
