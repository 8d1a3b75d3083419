"""Core interfaces/abstractions.

- Contracts (Protocol) that migration scripts are written against.
- Scripts depend on these abstractions, not on the recording implementation.
"""
