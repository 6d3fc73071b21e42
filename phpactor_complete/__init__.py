"""Prefix-cached phpactor completion for editor integrations."""

__version__ = "0.1.0"
