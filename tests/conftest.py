"""
Shared pytest fixtures for ecs-console tests.

This module provides:
- temp_home: isolated home directory so no real config file is read
- Mock boto3 ECS and SSM clients with canned responses
"""
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from ecs_console.environment.domains import config_loader


def client_error(code: str, operation: str = "Operation", message: str = "error") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def make_ecs_client(
    service_arns: Optional[List[str]] = None,
    services: Optional[List[Dict]] = None,
    containers: Optional[List[Dict]] = None,
) -> MagicMock:
    """Mock ECS client answering list_services, describe_services, describe_task_definition."""
    client = MagicMock(name="ecs")
    client.get_paginator.return_value.paginate.return_value = [
        {"serviceArns": list(service_arns or [])}
    ]
    client.describe_services.return_value = {"services": list(services or []), "failures": []}
    client.describe_task_definition.return_value = {
        "taskDefinition": {"containerDefinitions": list(containers or [])}
    }
    return client


def make_ssm_client(parameters: Optional[List[Dict]] = None, invalid: Optional[List[str]] = None) -> MagicMock:
    """Mock SSM client answering get_parameters with a fixed batch."""
    client = MagicMock(name="ssm")
    client.get_parameters.return_value = {
        "Parameters": list(parameters or []),
        "InvalidParameters": list(invalid or []),
    }
    return client


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Fixture to create a temporary home directory for testing."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)
    monkeypatch.delenv(config_loader.CONFIG_ENV_VAR, raising=False)
    return fake_home


@pytest.fixture
def web_ecs_client():
    """ECS cluster with services web and worker; web runs a Rails task definition."""
    return make_ecs_client(
        service_arns=[
            "arn:aws:ecs:eu-west-1:123456789012:service/production/web",
            "arn:aws:ecs:eu-west-1:123456789012:service/production/worker",
        ],
        services=[{
            "serviceName": "web",
            "status": "ACTIVE",
            "taskDefinition": "arn:aws:ecs:eu-west-1:123456789012:task-definition/web:42",
        }],
        containers=[{
            "name": "web",
            "environment": [{"name": "RAILS_ENV", "value": "production"}],
            "secrets": [{"name": "DB_PASSWORD", "valueFrom": "/prod/db/password"}],
        }],
    )


@pytest.fixture
def web_ssm_client():
    """SSM store holding the web service's database password."""
    return make_ssm_client(parameters=[{
        "Name": "/prod/db/password",
        "Value": "s3cr3t",
        "ARN": "arn:aws:ssm:eu-west-1:123456789012:parameter/prod/db/password",
    }])
