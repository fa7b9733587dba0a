"""Session construction and lookup."""
