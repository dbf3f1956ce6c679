"""SQL execution over a storage backend."""
