"""Vision Chain: chainable circle-detection pipeline with geometric filters."""

__version__ = "0.1.0"
