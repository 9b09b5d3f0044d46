"""Web-facing helpers: JSON result building and Flask request tracing."""

from .result_builder import prepare_results

__all__ = ["prepare_results"]
