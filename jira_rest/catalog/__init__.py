"""Declarative endpoint catalog, one YAML file per resource group."""

from .loader import EndpointSpec, ServiceSpec, load_catalog, python_name, snake_case

__all__ = ["EndpointSpec", "ServiceSpec", "load_catalog", "python_name", "snake_case"]
