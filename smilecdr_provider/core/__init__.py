"""Core domain: typed records, validation, transformations and reconciliation."""
