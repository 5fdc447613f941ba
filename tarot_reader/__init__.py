"""Three-card tarot reading simulator: deck, interpretation catalog, narrative generator and session engine."""

__version__ = "0.1.0"
