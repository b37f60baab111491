"""The Blueprint root document: building, lookup and YAML serialisation."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import yaml

from renderblueprint.types import (
    Database,
    EnvVarGroup,
    PreviewGeneration,
    Previews,
    Runtime,
    Service,
    ServiceType,
)
from renderblueprint.types import from_plain as _from_plain
from renderblueprint.types import to_plain as _to_plain

__all__ = ["Blueprint", "new_blueprint_from_services"]


class _ServiceBuilder(Protocol):
    def to_service(self) -> Service: ...


def _is_static_site(service: Service) -> bool:
    return (
        service.type == ServiceType.WEB
        and service.runtime is not None
        and service.runtime == Runtime.STATIC
        and service.static_publish_path is not None
    )


def _static_service_plain(service: Service) -> dict[str, Any]:
    """Plain mapping of a static site in the static service schema form."""
    data: dict[str, Any] = {
        "name": service.name,
        "type": "web",
        "runtime": "static",
    }
    if service.build_command is not None:
        data["buildCommand"] = service.build_command
    if service.static_publish_path is not None:
        data["staticPublishPath"] = service.static_publish_path
    if service.repo is not None:
        data["repo"] = service.repo
    if service.branch is not None:
        data["branch"] = service.branch
    if service.domains:
        data["domains"] = list(service.domains)
    # region is not part of the static service schema
    if service.headers:
        data["headers"] = _to_plain(service.headers)
    if service.routes:
        data["routes"] = _to_plain(service.routes)
    if service.auto_deploy is not None:
        data["autoDeploy"] = service.auto_deploy
    if service.build_filter is not None:
        data["buildFilter"] = _to_plain(service.build_filter)
    if service.root_dir is not None:
        data["rootDir"] = service.root_dir
    if service.env_vars:
        data["envVars"] = _to_plain(service.env_vars)
    if service.previews is not None:
        data["previews"] = _to_plain(service.previews)
    return dict(sorted(data.items()))


def _decode_list(cls: type, data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Blueprint.{key}: expected a sequence, got {value!r}")
    return [_from_plain(cls, item) for item in value]


@dataclass
class Blueprint:
    """A complete blueprint: services, databases, env groups and preview settings."""

    services: list[Service] = field(default_factory=list)
    databases: list[Database] = field(default_factory=list)
    env_var_groups: list[EnvVarGroup] = field(default_factory=list)
    previews: Optional[Previews] = None
    previews_expire_after_days: Optional[int] = None

    # Building

    def with_services(self, *args: _ServiceBuilder) -> Blueprint:
        """Append services built from service builders."""
        self.services.extend(builder.to_service() for builder in args)
        return self

    def with_databases(self, *args: Database) -> Blueprint:
        """Append copies of the given databases."""
        self.databases.extend(copy.deepcopy(db) for db in args)
        return self

    def with_env_var_groups(self, *args: EnvVarGroup) -> Blueprint:
        """Append copies of the given environment groups."""
        self.env_var_groups.extend(copy.deepcopy(group) for group in args)
        return self

    def with_previews(
        self,
        generation: PreviewGeneration | str,
        expire_after_days: Optional[int] = None,
    ) -> Blueprint:
        """Configure preview environments and, optionally, their expiry."""
        self.previews = Previews(generation=str(generation))
        if expire_after_days is not None:
            self.previews_expire_after_days = expire_after_days
        return self

    # Lookup

    def find_service(self, name: str) -> Optional[Service]:
        return next((s for s in self.services if s.name == name), None)

    def find_database(self, name: str) -> Optional[Database]:
        return next((db for db in self.databases if db.name == name), None)

    def find_env_var_group(self, name: str) -> Optional[EnvVarGroup]:
        return next((g for g in self.env_var_groups if g.name == name), None)

    # Serialisation

    def to_plain(self) -> dict[str, Any]:
        """Plain mapping with sorted top-level keys; static sites use their own form."""
        result: dict[str, Any] = {}
        if self.databases:
            result["databases"] = _to_plain(self.databases)
        if self.env_var_groups:
            result["envVarGroups"] = _to_plain(self.env_var_groups)
        if self.previews is not None:
            result["previews"] = _to_plain(self.previews)
        if self.previews_expire_after_days is not None:
            result["previewsExpireAfterDays"] = self.previews_expire_after_days
        if self.services:
            result["services"] = [
                _static_service_plain(s) if _is_static_site(s) else _to_plain(s)
                for s in self.services
            ]
        return result

    @classmethod
    def from_plain(cls, data: Any) -> Blueprint:
        """Build a blueprint from plain data; an empty document gives an empty blueprint."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"Blueprint: expected a mapping, got {data!r}")
        previews = _from_plain(Previews, data.get("previews"))
        expire = data.get("previewsExpireAfterDays")
        if expire is not None and (isinstance(expire, bool) or not isinstance(expire, int)):
            raise ValueError(
                f"Blueprint.previewsExpireAfterDays: expected an integer, got {expire!r}"
            )
        return cls(
            services=_decode_list(Service, data, "services"),
            databases=_decode_list(Database, data, "databases"),
            env_var_groups=_decode_list(EnvVarGroup, data, "envVarGroups"),
            previews=previews,
            previews_expire_after_days=expire,
        )

    def to_yaml_string(self) -> str:
        return yaml.safe_dump(
            self.to_plain(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    def to_yaml_bytes(self) -> bytes:
        return self.to_yaml_string().encode("utf-8")


def new_blueprint_from_services(
    services: Optional[Iterable[_ServiceBuilder]],
    databases: Optional[Iterable[Database]],
    env_groups: Optional[Iterable[EnvVarGroup]],
) -> Blueprint:
    """Build a blueprint from service builders, databases and environment groups."""
    return Blueprint(
        services=[builder.to_service() for builder in services or ()],
        databases=list(databases or ()),
        env_var_groups=list(env_groups or ()),
    )