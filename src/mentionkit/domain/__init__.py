"""Domain layer: types, events and collaborator protocols."""
