"""Serialization helpers for questions, templates and manifests."""
