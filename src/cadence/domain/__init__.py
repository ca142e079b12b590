"""Domain layer - abstractions with no dependencies on other layers.

This layer contains:
- protocols: Interfaces for editor hosts, sources, the source registry and the completion cache
- types: Shared domain types (CompleteOption, CompleteItem, SourceStat, etc.)
- events: Editor notifications, session signals and the event bus

All other layers depend on the domain layer.
"""
