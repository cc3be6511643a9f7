"""Infrastructure Layer - adapters for the store, the price source and messaging."""
