"""Service layer — decoding, encoding, and the outcome contract.

Services may import from domain and validation layers.
They must never import from commands or output.
"""
