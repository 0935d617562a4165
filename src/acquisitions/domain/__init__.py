"""Domain layer - business entities and services for authentication."""
