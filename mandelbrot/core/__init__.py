"""Complex arithmetic and escape-time iteration."""
