"""Builders for runtime-backed services: web services, workers and private services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from renderblueprint.configs import (
    BuildConfig,
    DockerConfig,
    GitConfig,
    PreviewConfig,
    ScalingConfig,
)
from renderblueprint.types import (
    Disk,
    DockerImage,
    EnvVar,
    Plan,
    Region,
    Runtime,
    Scaling,
    Service,
    ServiceType,
    env,
)

__all__ = ["WebService", "BackgroundWorker", "PrivateService"]


@dataclass
class _RuntimeService:
    """Fields and shared helpers of services that run code."""

    SERVICE_TYPE: ClassVar[ServiceType]

    name: str
    runtime: Runtime
    start_command: Optional[str] = None
    plan: Optional[Plan] = None
    region: Optional[Region] = None
    git: Optional[GitConfig] = None
    build: Optional[BuildConfig] = None
    docker: Optional[DockerConfig] = None
    preview: Optional[PreviewConfig] = None
    env_vars: list[EnvVar] = field(default_factory=list)
    max_shutdown_delay_seconds: Optional[int] = None
    disk: Optional[Disk] = None

    def _generic_service(self) -> Service:
        service = Service(
            name=self.name,
            type=self.SERVICE_TYPE,
            runtime=self.runtime,
            plan=self.plan,
            start_command=self.start_command,
            region=self.region,
            env_vars=list(self.env_vars),
            max_shutdown_delay_seconds=self.max_shutdown_delay_seconds,
            disk=self.disk,
        )
        for config in (self.git, self.build, self.docker, self.preview):
            if config is not None:
                config.apply_to(service)
        return service

    def _build_config(self) -> BuildConfig:
        if self.build is None:
            self.build = BuildConfig()
        return self.build

    def _set_git(self, repo: str, branch: Optional[str]) -> None:
        # Replaces any earlier Git settings.
        self.git = GitConfig(repo=repo, branch=branch)


@dataclass
class WebService(_RuntimeService):
    """A web service serving HTTP."""

    SERVICE_TYPE: ClassVar[ServiceType] = ServiceType.WEB

    domains: list[str] = field(default_factory=list)
    health_check_path: Optional[str] = None
    scaling: Optional[ScalingConfig] = None

    def to_service(self) -> Service:
        """Convert to the generic Service record."""
        service = self._generic_service()
        service.domains = list(self.domains)
        service.health_check_path = self.health_check_path
        if self.scaling is not None:
            self.scaling.apply_to(service)
        return service

    def with_domains(self, *args: str) -> WebService:
        self.domains.extend(args)
        return self

    def with_health_check(self, path: str) -> WebService:
        self.health_check_path = path
        return self

    def with_start_command(self, cmd: str) -> WebService:
        self.start_command = cmd
        return self

    def with_plan(self, plan: Plan) -> WebService:
        self.plan = plan
        return self

    def with_region(self, region: Region) -> WebService:
        self.region = region
        return self

    def with_git(self, repo: str, branch: Optional[str] = None) -> WebService:
        """Set the repository, and the branch if given."""
        self._set_git(repo, branch)
        return self

    def with_build(self, build_cmd: str) -> WebService:
        self._build_config().build_command = build_cmd
        return self

    def with_pre_deploy(self, cmd: str) -> WebService:
        self._build_config().pre_deploy_command = cmd
        return self

    def with_auto_deploy(self, enabled: bool) -> WebService:
        self._build_config().auto_deploy = enabled
        return self

    def with_docker(self, config: Optional[DockerConfig]) -> WebService:
        self.docker = config
        return self

    def _docker_config(self) -> DockerConfig:
        if self.docker is None:
            self.docker = DockerConfig()
        return self.docker

    def with_dockerfile(self, dockerfile_path: str, context: Optional[str] = None) -> WebService:
        docker = self._docker_config()
        docker.dockerfile_path = dockerfile_path
        if context is not None:
            docker.docker_context = context
        return self

    def with_docker_image(self, image_url: str) -> WebService:
        self._docker_config().image = DockerImage(url=image_url)
        return self

    def _scaling_config(self) -> ScalingConfig:
        if self.scaling is None:
            self.scaling = ScalingConfig()
        return self.scaling

    def with_scaling(self, num_instances: int) -> WebService:
        self._scaling_config().num_instances = num_instances
        return self

    def with_auto_scaling(
        self, min_instances: int, max_instances: int, target_cpu: Optional[int] = None
    ) -> WebService:
        self._scaling_config().scaling = Scaling(
            min_instances=min_instances,
            max_instances=max_instances,
            target_cpu_percent=target_cpu,
        )
        return self

    def with_env_vars(self, *args: EnvVar) -> WebService:
        self.env_vars.extend(args)
        return self

    def with_env(self, key: str, value: str) -> WebService:
        self.env_vars.append(env(key, value))
        return self

    def with_disk(self, name: str, mount_path: str, size_gb: Optional[int] = None) -> WebService:
        self.disk = Disk(name=name, mount_path=mount_path, size_gb=size_gb)
        return self


@dataclass
class BackgroundWorker(_RuntimeService):
    """A long-running worker without an HTTP endpoint."""

    SERVICE_TYPE: ClassVar[ServiceType] = ServiceType.WORKER

    def to_service(self) -> Service:
        """Convert to the generic Service record."""
        return self._generic_service()

    def with_start_command(self, cmd: str) -> BackgroundWorker:
        self.start_command = cmd
        return self

    def with_plan(self, plan: Plan) -> BackgroundWorker:
        self.plan = plan
        return self

    def with_region(self, region: Region) -> BackgroundWorker:
        self.region = region
        return self

    def with_git(self, repo: str, branch: Optional[str] = None) -> BackgroundWorker:
        """Set the repository, and the branch if given."""
        self._set_git(repo, branch)
        return self

    def with_build(self, build_cmd: str) -> BackgroundWorker:
        self._build_config().build_command = build_cmd
        return self

    def with_env_vars(self, *args: EnvVar) -> BackgroundWorker:
        self.env_vars.extend(args)
        return self

    def with_env(self, key: str, value: str) -> BackgroundWorker:
        self.env_vars.append(env(key, value))
        return self


@dataclass
class PrivateService(_RuntimeService):
    """A service reachable only on the private network."""

    SERVICE_TYPE: ClassVar[ServiceType] = ServiceType.PSERV

    def to_service(self) -> Service:
        """Convert to the generic Service record."""
        return self._generic_service()

    def with_start_command(self, cmd: str) -> PrivateService:
        self.start_command = cmd
        return self

    def with_plan(self, plan: Plan) -> PrivateService:
        self.plan = plan
        return self

    def with_region(self, region: Region) -> PrivateService:
        self.region = region
        return self

    def with_git(self, repo: str, branch: Optional[str] = None) -> PrivateService:
        """Set the repository, and the branch if given."""
        self._set_git(repo, branch)
        return self

    def with_build(self, build_cmd: str) -> PrivateService:
        self._build_config().build_command = build_cmd
        return self

    def with_env_vars(self, *args: EnvVar) -> PrivateService:
        self.env_vars.extend(args)
        return self

    def with_env(self, key: str, value: str) -> PrivateService:
        self.env_vars.append(env(key, value))
        return self