"""Data: historical population sources, macro-factor providers and packaged tables."""
