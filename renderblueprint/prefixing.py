"""Renaming resources with a prefix and inspecting resource references."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from renderblueprint.blueprint import Blueprint
from renderblueprint.operations import copy_blueprint
from renderblueprint.types import EnvVar

__all__ = [
    "prefix_blueprint",
    "prefix_blueprint_with_separator",
    "get_all_resource_names",
    "get_external_references",
]


def prefix_blueprint(blueprint: Optional[Blueprint], prefix: str) -> Blueprint:
    """Return a copy with every named resource prefixed.

    References to resources defined in the blueprint follow the rename;
    references to resources defined elsewhere are left unchanged.
    """
    if blueprint is None or not prefix:
        return copy_blueprint(blueprint)

    prefixed = copy_blueprint(blueprint)

    service_map = {s.name: prefix + s.name for s in prefixed.services}
    database_map = {db.name: prefix + db.name for db in prefixed.databases}
    group_map = {g.name: prefix + g.name for g in prefixed.env_var_groups}

    for service in prefixed.services:
        service.name = service_map[service.name]
    for db in prefixed.databases:
        db.name = database_map[db.name]
    for group in prefixed.env_var_groups:
        group.name = group_map[group.name]

    def update_references(env_vars: Iterable[EnvVar]) -> None:
        for env_var in env_vars:
            if env_var.from_database is not None:
                name = env_var.from_database.name
                env_var.from_database.name = database_map.get(name, name)
            if env_var.from_service is not None:
                name = env_var.from_service.name
                env_var.from_service.name = service_map.get(name, name)
            if env_var.from_group is not None:
                env_var.from_group = group_map.get(env_var.from_group, env_var.from_group)

    for service in prefixed.services:
        update_references(service.env_vars)
    for group in prefixed.env_var_groups:
        update_references(group.env_vars)

    for db in prefixed.databases:
        stem = db.name[: len(db.name) - len(prefix)]
        for replica in db.read_replicas:
            if replica.name.startswith(stem):
                replica.name = replica.name.replace(stem, db.name, 1)

    return prefixed


def prefix_blueprint_with_separator(
    blueprint: Optional[Blueprint], prefix: str, separator: str = "-"
) -> Blueprint:
    """Prefix all resources with prefix + separator; an empty separator means '-'."""
    if not separator:
        separator = "-"
    return prefix_blueprint(blueprint, prefix + separator)


def get_all_resource_names(
    blueprint: Optional[Blueprint],
) -> tuple[list[str], list[str], list[str]]:
    """Return the service, database and environment group names, in order."""
    if blueprint is None:
        return [], [], []
    return (
        [s.name for s in blueprint.services],
        [db.name for db in blueprint.databases],
        [g.name for g in blueprint.env_var_groups],
    )


def get_external_references(
    blueprint: Optional[Blueprint],
) -> tuple[list[str], list[str], list[str]]:
    """Return referenced service, database and group names not defined in the blueprint."""
    if blueprint is None:
        return [], [], []

    services = {s.name for s in blueprint.services}
    databases = {db.name for db in blueprint.databases}
    groups = {g.name for g in blueprint.env_var_groups}

    external_services: dict[str, None] = {}
    external_databases: dict[str, None] = {}
    external_groups: dict[str, None] = {}

    all_env_vars = [v for s in blueprint.services for v in s.env_vars]
    all_env_vars += [v for g in blueprint.env_var_groups for v in g.env_vars]

    for env_var in all_env_vars:
        if env_var.from_database is not None and env_var.from_database.name not in databases:
            external_databases[env_var.from_database.name] = None
        if env_var.from_service is not None and env_var.from_service.name not in services:
            external_services[env_var.from_service.name] = None
        if env_var.from_group is not None and env_var.from_group not in groups:
            external_groups[env_var.from_group] = None

    return list(external_services), list(external_databases), list(external_groups)