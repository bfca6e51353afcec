"""Core ACL data structures, errors and settings."""
