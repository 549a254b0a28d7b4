"""HTTP layer: configuration, errors and meeting routes."""
