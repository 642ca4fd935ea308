"""Core domain primitives for neo-rbac: exceptions and value objects."""
