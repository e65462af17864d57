"""GUI-agnostic core of the report outline: models, tree algorithms, services."""
