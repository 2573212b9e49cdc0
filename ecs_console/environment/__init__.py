"""Environment resolution for ECS services."""
