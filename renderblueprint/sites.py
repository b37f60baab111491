"""Builders for cron jobs, static sites and key-value stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from renderblueprint.configs import (
    BuildConfig,
    DockerConfig,
    GitConfig,
    KeyValueConfig,
    PreviewConfig,
    StaticSiteConfig,
)
from renderblueprint.types import (
    EnvVar,
    Header,
    IPAllow,
    MaxMemoryPolicy,
    Plan,
    Region,
    Route,
    Runtime,
    Service,
    ServiceType,
)
from renderblueprint.types import to_plain as _to_plain

__all__ = ["CronJob", "StaticSite", "KeyValueService"]


def _apply_configs(service: Service, *configs: Any) -> None:
    for config in configs:
        if config is not None:
            config.apply_to(service)


@dataclass
class CronJob:
    """A job run on a cron schedule."""

    name: str
    runtime: Runtime
    schedule: str
    start_command: Optional[str] = None
    region: Optional[Region] = None
    git: Optional[GitConfig] = None
    build: Optional[BuildConfig] = None
    docker: Optional[DockerConfig] = None
    preview: Optional[PreviewConfig] = None
    env_vars: list[EnvVar] = field(default_factory=list)

    def to_service(self) -> Service:
        """Convert to the generic Service record."""
        service = Service(
            name=self.name,
            type=ServiceType.CRON,
            runtime=self.runtime,
            start_command=self.start_command,
            region=self.region,
            env_vars=list(self.env_vars),
            schedule=self.schedule,
        )
        _apply_configs(service, self.git, self.build, self.docker, self.preview)
        return service

    def with_start_command(self, cmd: str) -> CronJob:
        self.start_command = cmd
        return self

    def with_region(self, region: Region) -> CronJob:
        self.region = region
        return self

    def with_git(self, repo: str, branch: Optional[str] = None) -> CronJob:
        """Set the repository, and the branch if given; replaces earlier Git settings."""
        self.git = GitConfig(repo=repo, branch=branch)
        return self

    def with_build(self, build_cmd: str) -> CronJob:
        if self.build is None:
            self.build = BuildConfig()
        self.build.build_command = build_cmd
        return self

    def with_env_vars(self, *args: EnvVar) -> CronJob:
        self.env_vars.extend(args)
        return self


@dataclass
class StaticSite:
    """A static website published from a build directory."""

    name: str
    region: Optional[Region] = None
    git: Optional[GitConfig] = None
    build: Optional[BuildConfig] = None
    static_site: Optional[StaticSiteConfig] = None
    preview: Optional[PreviewConfig] = None
    domains: list[str] = field(default_factory=list)

    def to_service(self) -> Service:
        """Convert to a generic web Service with the static runtime."""
        service = Service(
            name=self.name,
            type=ServiceType.WEB,
            runtime=Runtime.STATIC,
            domains=list(self.domains),
            region=self.region,
        )
        _apply_configs(service, self.git, self.build)
        if self.static_site is not None:
            service.static_publish_path = self.static_site.static_publish_path
            service.headers = list(self.static_site.headers)
            service.routes = list(self.static_site.routes)
        _apply_configs(service, self.preview)
        return service

    def to_plain(self) -> dict[str, Any]:
        """Plain mapping in the static service form of the blueprint schema."""
        result: dict[str, Any] = {"name": self.name, "type": "web", "runtime": "static"}
        if self.domains:
            result["domains"] = list(self.domains)
        if self.region is not None:
            result["region"] = _to_plain(self.region)
        if self.git is not None:
            if self.git.repo is not None:
                result["repo"] = self.git.repo
            if self.git.branch is not None:
                result["branch"] = self.git.branch
        if self.build is not None:
            if self.build.build_command is not None:
                result["buildCommand"] = self.build.build_command
            if self.build.pre_deploy_command is not None:
                result["preDeployCommand"] = self.build.pre_deploy_command
            if self.build.build_filter is not None:
                result["buildFilter"] = _to_plain(self.build.build_filter)
            if self.build.root_dir is not None:
                result["rootDir"] = self.build.root_dir
            if self.build.auto_deploy is not None:
                result["autoDeploy"] = self.build.auto_deploy
        if self.static_site is not None:
            if self.static_site.static_publish_path:
                result["staticPublishPath"] = self.static_site.static_publish_path
            if self.static_site.headers:
                result["headers"] = _to_plain(self.static_site.headers)
            if self.static_site.routes:
                result["routes"] = _to_plain(self.static_site.routes)
        # previewPlan is not part of the static service schema
        if self.preview is not None and self.preview.previews is not None:
            result["previews"] = _to_plain(self.preview.previews)
        return result

    def _site_config(self) -> StaticSiteConfig:
        if self.static_site is None:
            self.static_site = StaticSiteConfig()
        return self.static_site

    def with_publish_path(self, path: str) -> StaticSite:
        self._site_config().static_publish_path = path
        return self

    def with_domains(self, *args: str) -> StaticSite:
        self.domains.extend(args)
        return self

    def with_headers(self, *args: Header) -> StaticSite:
        self._site_config().headers.extend(args)
        return self

    def with_routes(self, *args: Route) -> StaticSite:
        self._site_config().routes.extend(args)
        return self

    def with_region(self, region: Region) -> StaticSite:
        self.region = region
        return self

    def with_git(self, repo: str, branch: Optional[str] = None) -> StaticSite:
        """Set the repository, and the branch if given; replaces earlier Git settings."""
        self.git = GitConfig(repo=repo, branch=branch)
        return self

    def with_build(self, build_cmd: str) -> StaticSite:
        if self.build is None:
            self.build = BuildConfig()
        self.build.build_command = build_cmd
        return self


@dataclass
class KeyValueService:
    """A Redis-compatible key-value store."""

    name: str
    plan: Optional[Plan] = None
    region: Optional[Region] = None
    key_value: Optional[KeyValueConfig] = None
    preview: Optional[PreviewConfig] = None

    def to_service(self) -> Service:
        """Convert to the generic Service record (no runtime)."""
        service = Service(
            name=self.name,
            type=ServiceType.KEY_VALUE,
            plan=self.plan,
            region=self.region,
        )
        if self.key_value is not None:
            service.ip_allow_list = list(self.key_value.ip_allow_list)
            service.max_memory_policy = self.key_value.max_memory_policy
        _apply_configs(service, self.preview)
        return service

    def _kv_config(self) -> KeyValueConfig:
        if self.key_value is None:
            self.key_value = KeyValueConfig()
        return self.key_value

    def with_plan(self, plan: Plan) -> KeyValueService:
        self.plan = plan
        return self

    def with_region(self, region: Region) -> KeyValueService:
        self.region = region
        return self

    def with_ip_allow_list(self, *args: IPAllow) -> KeyValueService:
        self._kv_config().ip_allow_list.extend(args)
        return self

    def with_public_access(self) -> KeyValueService:
        """Allow connections from anywhere."""
        return self.with_ip_allow_list(
            IPAllow(source="0.0.0.0/0", description="public access")
        )

    def with_max_memory_policy(self, policy: MaxMemoryPolicy) -> KeyValueService:
        self._kv_config().max_memory_policy = policy
        return self