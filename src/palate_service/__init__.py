"""Palate Service - personalization context engine over a knowledge graph."""

__version__ = "0.1.0"
