"""Slide DSL: document schema and operation plans."""
