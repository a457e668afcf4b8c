"""Domain models for turning Koinly transactions into statement fragments.

Records, fragments and the per-run registries are plain in-memory (Pydantic)
models so the classification rules can be tested without any I/O.
"""

__all__ = [
    "currency_index",
    "dispatcher",
    "errors",
    "fragments",
    "handlers",
    "render_pass",
    "securities",
    "transactions",
]
