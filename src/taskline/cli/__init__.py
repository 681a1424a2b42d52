"""Composition root, slash commands and the console entry point."""
