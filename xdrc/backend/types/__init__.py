"""Type-level analyses used by the backend."""
