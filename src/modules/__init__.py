"""Workflow nodes.

Each node package is self-contained with its own description, schemas,
exceptions and execution logic.
"""
