"""API module for shoplab.

API layer:
- Validates inputs, reads/writes DB through services and the reader
- Returns read-models, never ORM entities
"""
