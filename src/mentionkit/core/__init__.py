"""Core layer: configuration, errors and boundary/trigger scanning."""
