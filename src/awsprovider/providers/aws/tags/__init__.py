"""Per-service tag API adapters."""
