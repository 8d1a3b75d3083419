"""Domain models and entities.

- Plain, strict data structures (Pydantic v2) describing content-model changes.
- The domain knows nothing about HTTP, the CLI, or how scripts are loaded.
"""
