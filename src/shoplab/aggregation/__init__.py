"""Aggregation module for order reads.

- Reads the store and shapes nested order views
- Forbidden: writes, HTTP concerns
"""
