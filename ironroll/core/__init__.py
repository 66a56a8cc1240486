"""Core infrastructure: shared data types, events, configuration and randomness."""
