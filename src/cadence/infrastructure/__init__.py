"""Infrastructure layer - editor host implementations.

The infrastructure layer implements domain protocols and has no dependencies
on the presentation layer.
"""
