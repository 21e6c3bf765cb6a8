"""Registry access: sources of known artifact versions."""
