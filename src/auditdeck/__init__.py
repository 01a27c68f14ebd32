"""auditdeck: presentation layer for security audit results."""

__version__ = "0.1.0"
