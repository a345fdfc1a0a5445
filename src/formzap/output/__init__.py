"""Output layer — render decode outcomes for humans (Rich) or machines (JSON)."""
