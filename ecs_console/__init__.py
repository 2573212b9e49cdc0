"""ecs-console: run commands with the environment of an ECS service."""

VERSION = "0.1.0"
