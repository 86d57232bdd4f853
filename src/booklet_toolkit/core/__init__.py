"""Core models, schemas and serialization shared by the builder."""
