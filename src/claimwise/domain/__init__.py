"""Pure domain layer: model, ports and engine services."""
