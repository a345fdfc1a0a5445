"""Configuration layer — models, discovery, settings, and logging."""
