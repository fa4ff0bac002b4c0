"""Output contracts: JSON schemas bundled under ``data/schemas``."""
