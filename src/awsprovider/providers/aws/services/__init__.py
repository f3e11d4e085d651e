"""Per-service resource kinds: finders, status functions, waiters, handlers and sweepers."""
