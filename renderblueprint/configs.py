"""Groups of related service settings that builders apply onto a Service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from renderblueprint.types import (
    BuildFilter,
    DockerImage,
    Header,
    IPAllow,
    MaxMemoryPolicy,
    Plan,
    RegistryCredential,
    Route,
    Scaling,
    Service,
    ServicePreviews,
)

__all__ = [
    "DockerConfig",
    "GitConfig",
    "BuildConfig",
    "ScalingConfig",
    "PreviewConfig",
    "StaticSiteConfig",
    "KeyValueConfig",
]


def _opt(key: str) -> Any:
    return field(default=None, metadata={"yaml": key, "omit": "nil"})


def _seq(key: str, omitempty: bool = True) -> Any:
    return field(
        default_factory=list,
        metadata={"yaml": key, "omit": "empty" if omitempty else None},
    )


@dataclass
class DockerConfig:
    """Docker build or prebuilt-image settings."""

    docker_command: Optional[str] = _opt("dockerCommand")
    dockerfile_path: Optional[str] = _opt("dockerfilePath")
    docker_context: Optional[str] = _opt("dockerContext")
    image: Optional[DockerImage] = _opt("image")
    registry_credential: Optional[RegistryCredential] = _opt("registryCredential")

    def apply_to(self, service: Service) -> None:
        service.docker_command = self.docker_command
        service.dockerfile_path = self.dockerfile_path
        service.docker_context = self.docker_context
        service.image = self.image
        service.registry_credential = self.registry_credential


@dataclass
class GitConfig:
    """Repository and branch to deploy from."""

    repo: Optional[str] = _opt("repo")
    branch: Optional[str] = _opt("branch")

    def apply_to(self, service: Service) -> None:
        service.repo = self.repo
        service.branch = self.branch


@dataclass
class BuildConfig:
    """Build and deployment commands and options."""

    build_command: Optional[str] = _opt("buildCommand")
    pre_deploy_command: Optional[str] = _opt("preDeployCommand")
    build_filter: Optional[BuildFilter] = _opt("buildFilter")
    root_dir: Optional[str] = _opt("rootDir")
    auto_deploy: Optional[bool] = _opt("autoDeploy")

    def apply_to(self, service: Service) -> None:
        service.build_command = self.build_command
        service.pre_deploy_command = self.pre_deploy_command
        service.build_filter = self.build_filter
        service.root_dir = self.root_dir
        service.auto_deploy = self.auto_deploy


@dataclass
class ScalingConfig:
    """Manual instance count or autoscaling settings."""

    num_instances: Optional[int] = _opt("numInstances")
    scaling: Optional[Scaling] = _opt("scaling")

    def apply_to(self, service: Service) -> None:
        service.num_instances = self.num_instances
        service.scaling = self.scaling


@dataclass
class PreviewConfig:
    """Preview environment settings for a service."""

    previews: Optional[ServicePreviews] = _opt("previews")
    preview_plan: Optional[Plan] = _opt("previewPlan")

    def apply_to(self, service: Service) -> None:
        service.previews = self.previews
        service.preview_plan = self.preview_plan


@dataclass
class StaticSiteConfig:
    """Publish path, headers and routes of a static site."""

    static_publish_path: str = field(
        default="", metadata={"yaml": "staticPublishPath", "omit": None}
    )
    headers: list[Header] = _seq("headers")
    routes: list[Route] = _seq("routes")


@dataclass
class KeyValueConfig:
    """Access list and eviction policy of a key-value store."""

    ip_allow_list: list[IPAllow] = _seq("ipAllowList", omitempty=False)
    max_memory_policy: Optional[MaxMemoryPolicy] = _opt("maxmemoryPolicy")