"""Trading use cases."""
