"""Configuration, logging and formatting helpers."""
