"""Adapters: HTTP, Content Management API and exporters."""
