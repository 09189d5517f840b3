"""Core domain logic: short codes, metadata resolution, enrichment."""
