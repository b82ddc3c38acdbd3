"""Domain layer: resource model, ports, resolution cache and reconciliation."""
