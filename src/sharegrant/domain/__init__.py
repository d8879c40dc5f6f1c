"""Domain layer - entities, value objects and pure ACL services."""
