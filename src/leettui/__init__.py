"""Terminal client for browsing, scaffolding and submitting judge problems."""

__version__ = "0.1.0"
