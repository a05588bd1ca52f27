"""Declarative management of SmileCDR OpenID Connect clients and identity providers."""

__version__ = "0.1.0"
