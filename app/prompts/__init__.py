"""Prompt builders. Each returns a list of chat message dicts."""
