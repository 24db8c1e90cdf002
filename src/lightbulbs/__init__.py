"""Lightbulbs: a personal knowledge base of notes, categories, tags and references."""

__version__ = "0.1.0"
