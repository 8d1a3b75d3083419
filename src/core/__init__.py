"""Core: configuration, domain, migration context and services."""
