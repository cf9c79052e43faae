"""Backend features."""
