"""Domain layer — schema shapes, flat submissions, coercion, and paths.

This layer depends only on stdlib and :mod:`formzap.errors`.
It must never import from services, validation, commands, or config.
"""
