"""Provisioning core: archive cache, extractor, generator backends, task graph."""
