"""Whole-blueprint operations: merging, copying, validation and conflict detection."""

from __future__ import annotations

import copy
from typing import Optional

from renderblueprint.blueprint import Blueprint
from renderblueprint.types import ServiceType

__all__ = [
    "MergeConflictError",
    "merge_blueprints",
    "copy_blueprint",
    "validate_blueprint",
    "find_conflicts",
]


class MergeConflictError(ValueError):
    """Raised when two blueprints define resources with the same name."""

    def __init__(self, conflicts: list[str]) -> None:
        self.conflicts = list(conflicts)
        super().__init__(
            "merge conflicts found: "
            + ", ".join(self.conflicts)
            + ". Use prefix_blueprint() to avoid name conflicts before merging"
        )


def merge_blueprints(
    base: Optional[Blueprint], overlay: Optional[Blueprint]
) -> Blueprint:
    """Combine two blueprints; the overlay's preview settings win.

    Raises MergeConflictError if any resource names clash.
    """
    if base is None and overlay is None:
        return Blueprint()
    if base is None:
        return copy_blueprint(overlay)
    if overlay is None:
        return copy_blueprint(base)

    conflicts = find_conflicts(base, overlay)
    if conflicts:
        raise MergeConflictError(conflicts)

    previews = overlay.previews if overlay.previews is not None else base.previews
    expire = (
        overlay.previews_expire_after_days
        if overlay.previews_expire_after_days is not None
        else base.previews_expire_after_days
    )
    return Blueprint(
        services=copy.deepcopy(base.services + overlay.services),
        databases=copy.deepcopy(base.databases + overlay.databases),
        env_var_groups=copy.deepcopy(base.env_var_groups + overlay.env_var_groups),
        previews=copy.deepcopy(previews),
        previews_expire_after_days=expire,
    )


def copy_blueprint(blueprint: Optional[Blueprint]) -> Blueprint:
    """Return an independent deep copy; None gives an empty blueprint."""
    if blueprint is None:
        return Blueprint()
    return copy.deepcopy(blueprint)


def _duplicates(names: list[str], label: str) -> list[str]:
    seen: set[str] = set()
    errors = []
    for name in names:
        if name in seen:
            errors.append(f"duplicate {label} name: {name}")
        seen.add(name)
    return errors


def validate_blueprint(blueprint: Optional[Blueprint]) -> list[str]:
    """Return a list of problems found in the blueprint; empty when it is valid."""
    if blueprint is None:
        return ["blueprint is nil"]

    errors: list[str] = []
    errors += _duplicates([s.name for s in blueprint.services], "service")
    errors += _duplicates([db.name for db in blueprint.databases], "database")
    errors += _duplicates(
        [g.name for g in blueprint.env_var_groups], "environment group"
    )

    for service in blueprint.services:
        if not service.name:
            errors.append("service missing name")
        if not service.type:
            errors.append(f"service {service.name} missing type")
        if service.runtime is None and service.type != ServiceType.KEY_VALUE:
            errors.append(f"service {service.name} missing runtime")

    errors += ["database missing name" for db in blueprint.databases if not db.name]
    errors += [
        "environment group missing name"
        for group in blueprint.env_var_groups
        if not group.name
    ]
    return errors


def find_conflicts(
    base: Optional[Blueprint], overlay: Optional[Blueprint]
) -> list[str]:
    """List the resource names that both blueprints define."""
    if base is None or overlay is None:
        return []

    conflicts: list[str] = []
    base_services = {s.name for s in base.services}
    conflicts += [
        f"service name conflict: {s.name}"
        for s in overlay.services
        if s.name in base_services
    ]
    base_dbs = {db.name for db in base.databases}
    conflicts += [
        f"database name conflict: {db.name}"
        for db in overlay.databases
        if db.name in base_dbs
    ]
    base_groups = {g.name for g in base.env_var_groups}
    conflicts += [
        f"environment group name conflict: {g.name}"
        for g in overlay.env_var_groups
        if g.name in base_groups
    ]
    return conflicts