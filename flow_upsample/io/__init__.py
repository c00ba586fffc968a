"""Flow file input/output."""
