"""Cross-cutting configuration, crypto and logging helpers."""
