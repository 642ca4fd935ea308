"""Features module for neo-rbac."""
