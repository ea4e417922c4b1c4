"""WPAI Bridge: token-authenticated site configuration API for AI agents."""

__version__ = "0.3.0"
