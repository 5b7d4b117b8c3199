"""Domain layer: entities, error kinds and hierarchy algorithms."""
