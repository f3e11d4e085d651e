"""
Domain Layer - resource model shared by every resource kind

- core/: Exceptions and duration parsing
- resource/: Schemas, descriptors, state accessors, identifiers and naming
- tags/: Key/value tag engine
"""
