"""Application layer - ports, cascade services and use cases."""
