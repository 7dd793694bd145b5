"""Classifier version, stamped on every output row."""

VERSION = "2025.9.1"
