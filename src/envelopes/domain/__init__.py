"""Domain layer for envelopes application."""
