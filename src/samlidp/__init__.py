"""Declarative reconciliation of SAML identity providers."""

__version__ = "0.1.0"
