"""Assuan pinentry that delegates the prompt to an external picker."""

__version__ = "0.2.0"
