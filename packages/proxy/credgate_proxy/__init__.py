"""credgate HTTP service."""
