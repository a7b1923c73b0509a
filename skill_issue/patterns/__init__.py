"""Declarative rule corpus shipped as YAML data."""
