"""Helpers for naming, pruning, typing and response handling when generating Go code from OpenAPI 3 specifications."""

__version__ = "0.1.0"
__all__ = ["names", "prune", "schema", "responses"]