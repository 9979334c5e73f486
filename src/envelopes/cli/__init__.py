"""Command-line interface for envelopes."""
