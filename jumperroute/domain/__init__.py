"""Domain layer: models and pure domain services."""
