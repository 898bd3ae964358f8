"""Configuration: environment settings and operational constants."""
