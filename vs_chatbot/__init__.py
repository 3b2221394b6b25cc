"""Conversational agent backend for verifiable-credential messaging channels."""

__version__ = "1.0.0"
