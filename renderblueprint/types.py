"""Core data model of a Render blueprint: enums, resource records and env helpers."""

import types as _pytypes
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Optional, Union

__all__ = [
    "ServiceType",
    "Runtime",
    "Plan",
    "Region",
    "PreviewGeneration",
    "RouteType",
    "MaxMemoryPolicy",
    "DatabaseProperty",
    "ServiceProperty",
    "PostgreSQLVersion",
    "Service",
    "Database",
    "EnvVar",
    "EnvVarGroup",
    "FromDatabase",
    "FromService",
    "Scaling",
    "DockerImage",
    "ImageCredentials",
    "RegistryCredsRef",
    "RegistryCredential",
    "BuildFilter",
    "Disk",
    "Header",
    "Route",
    "IPAllow",
    "ReadReplica",
    "HighAvailability",
    "Previews",
    "ServicePreviews",
    "to_plain",
    "from_plain",
    "env",
    "env_from_database",
    "env_from_service",
    "env_secret",
    "env_generated",
    "env_from_group",
]


class _StrEnum(str, Enum):
    """String enum whose str() is its value."""

    def __str__(self) -> str:
        return str(self.value)


class ServiceType(_StrEnum):
    WEB = "web"
    WORKER = "worker"
    PSERV = "pserv"
    CRON = "cron"
    KEY_VALUE = "keyvalue"
    REDIS = "redis"  # deprecated alias


class Runtime(_StrEnum):
    NODE = "node"
    PYTHON = "python"
    RUBY = "ruby"
    GO = "go"
    RUST = "rust"
    DOCKER = "docker"
    STATIC = "static"
    IMAGE = "image"


class Plan(_StrEnum):
    # Service plans
    STARTER = "starter"
    STANDARD = "standard"
    STANDARD_2X = "standard-2x"
    STANDARD_4X = "standard-4x"
    PRO = "pro"
    PRO_2X = "pro-2x"
    PRO_4X = "pro-4x"
    PRO_MAX = "pro-max"
    # Database plans
    BASIC_256MB = "basic-256mb"
    BASIC_1GB = "basic-1gb"
    BASIC_4GB = "basic-4gb"
    PRO_8GB = "pro-8gb"
    PRO_16GB = "pro-16gb"
    # Key value plans
    FREE = "free"


class Region(_StrEnum):
    OREGON = "oregon"
    VIRGINIA = "virginia"
    FRANKFURT = "frankfurt"
    SINGAPORE = "singapore"


class PreviewGeneration(_StrEnum):
    AUTOMATIC = "automatic"
    NONE = "none"


class RouteType(_StrEnum):
    REDIRECT = "redirect"
    REWRITE = "rewrite"


class MaxMemoryPolicy(_StrEnum):
    ALL_KEYS_LRU = "allkeys-lru"
    ALL_KEYS_RANDOM = "allkeys-random"
    VOLATILE_LRU = "volatile-lru"
    VOLATILE_RANDOM = "volatile-random"
    VOLATILE_TTL = "volatile-ttl"
    NO_EVICTION = "noeviction"


class DatabaseProperty(_StrEnum):
    CONNECTION_STRING = "connectionString"
    INTERNAL_CONNECTION_STRING = "internalConnectionString"
    HOST = "host"
    PORT = "port"
    USER = "user"
    PASSWORD = "password"
    DATABASE = "database"


class ServiceProperty(_StrEnum):
    HOST = "host"
    PORT = "port"
    CONNECTION_STRING = "connectionString"
    INTERNAL_CONNECTION_STRING = "internalConnectionString"


class PostgreSQLVersion(_StrEnum):
    POSTGRESQL_13 = "13"
    POSTGRESQL_14 = "14"
    POSTGRESQL_15 = "15"
    POSTGRESQL_16 = "16"


# Field declarations. "omit" is None (always written), "nil" (skipped when
# None) or "empty" (skipped when None or an empty container/string).


def _req(key: str, default: Any = "") -> Any:
    return field(default=default, metadata={"yaml": key, "omit": None})


def _opt(key: str) -> Any:
    return field(default=None, metadata={"yaml": key, "omit": "nil"})


def _seq(key: str, omitempty: bool = True) -> Any:
    return field(
        default_factory=list,
        metadata={"yaml": key, "omit": "empty" if omitempty else None},
    )


@dataclass
class RegistryCredsRef:
    name: str = _req("name")


@dataclass
class ImageCredentials:
    from_registry_creds: Optional[RegistryCredsRef] = _opt("fromRegistryCreds")


@dataclass
class RegistryCredential:
    from_registry_creds: Optional[RegistryCredsRef] = _opt("fromRegistryCreds")


@dataclass
class DockerImage:
    url: str = _req("url")
    credentials: Optional[ImageCredentials] = _opt("credentials")


@dataclass
class FromDatabase:
    name: str = _req("name")
    property: DatabaseProperty = _req("property")


@dataclass
class FromService:
    name: str = _req("name")
    type: ServiceType = _req("type")
    property: Optional[ServiceProperty] = _opt("property")
    env_var_key: Optional[str] = _opt("envVarKey")


@dataclass
class EnvVar:
    key: Optional[str] = _opt("key")
    value: Optional[str] = _opt("value")
    generate_value: Optional[bool] = _opt("generateValue")
    sync: Optional[bool] = _opt("sync")
    from_database: Optional[FromDatabase] = _opt("fromDatabase")
    from_service: Optional[FromService] = _opt("fromService")
    from_group: Optional[str] = _opt("fromGroup")


@dataclass
class Scaling:
    min_instances: Optional[int] = _opt("minInstances")
    max_instances: Optional[int] = _opt("maxInstances")
    target_memory_percent: Optional[int] = _opt("targetMemoryPercent")
    target_cpu_percent: Optional[int] = _opt("targetCPUPercent")


@dataclass
class BuildFilter:
    paths: list[str] = _seq("paths")
    ignored_paths: list[str] = _seq("ignoredPaths")


@dataclass
class Disk:
    name: str = _req("name")
    mount_path: str = _req("mountPath")
    size_gb: Optional[int] = _opt("sizeGB")


@dataclass
class Header:
    path: str = _req("path")
    name: str = _req("name")
    value: str = _req("value")


@dataclass
class Route:
    type: str = _req("type")
    source: str = _req("source")
    destination: str = _req("destination")


@dataclass
class IPAllow:
    source: str = _req("source")
    description: Optional[str] = _opt("description")


@dataclass
class ReadReplica:
    name: str = _req("name")


@dataclass
class HighAvailability:
    enabled: bool = _req("enabled", False)


@dataclass
class Previews:
    generation: str = _req("generation")


@dataclass
class ServicePreviews:
    generation: str = _req("generation")


@dataclass
class Service:
    """A service entry as it appears in a blueprint."""

    name: str = _req("name")
    type: ServiceType = _req("type")
    runtime: Optional[Runtime] = _opt("runtime")
    plan: Optional[Plan] = _opt("plan")
    previews: Optional[ServicePreviews] = _opt("previews")
    preview_plan: Optional[Plan] = _opt("previewPlan")
    build_command: Optional[str] = _opt("buildCommand")
    start_command: Optional[str] = _opt("startCommand")
    pre_deploy_command: Optional[str] = _opt("preDeployCommand")
    repo: Optional[str] = _opt("repo")
    branch: Optional[str] = _opt("branch")
    auto_deploy: Optional[bool] = _opt("autoDeploy")
    max_shutdown_delay_seconds: Optional[int] = _opt("maxShutdownDelaySeconds")
    domains: list[str] = _seq("domains")
    region: Optional[Region] = _opt("region")
    num_instances: Optional[int] = _opt("numInstances")
    scaling: Optional[Scaling] = _opt("scaling")
    env_vars: list[EnvVar] = _seq("envVars")
    docker_command: Optional[str] = _opt("dockerCommand")
    dockerfile_path: Optional[str] = _opt("dockerfilePath")
    docker_context: Optional[str] = _opt("dockerContext")
    image: Optional[DockerImage] = _opt("image")
    registry_credential: Optional[RegistryCredential] = _opt("registryCredential")
    build_filter: Optional[BuildFilter] = _opt("buildFilter")
    root_dir: Optional[str] = _opt("rootDir")
    disk: Optional[Disk] = _opt("disk")
    static_publish_path: Optional[str] = _opt("staticPublishPath")
    headers: list[Header] = _seq("headers")
    routes: list[Route] = _seq("routes")
    schedule: Optional[str] = _opt("schedule")
    ip_allow_list: list[IPAllow] = _seq("ipAllowList")
    max_memory_policy: Optional[MaxMemoryPolicy] = _opt("maxmemoryPolicy")
    health_check_path: Optional[str] = _opt("healthCheckPath")


@dataclass
class Database:
    """A PostgreSQL database entry, with fluent setters."""

    name: str = _req("name")
    plan: Optional[Plan] = _opt("plan")
    preview_plan: Optional[Plan] = _opt("previewPlan")
    disk_size_gb: Optional[int] = _opt("diskSizeGB")
    preview_disk_size_gb: Optional[int] = _opt("previewDiskSizeGB")
    region: Optional[Region] = _opt("region")
    postgres_major_version: Optional[PostgreSQLVersion] = _opt("postgresMajorVersion")
    database_name: Optional[str] = _opt("databaseName")
    user: Optional[str] = _opt("user")
    ip_allow_list: list[IPAllow] = _seq("ipAllowList")
    read_replicas: list[ReadReplica] = _seq("readReplicas")
    high_availability: Optional[HighAvailability] = _opt("highAvailability")

    def with_plan(self, plan: Plan) -> "Database":
        self.plan = plan
        return self

    def with_preview_plan(self, plan: Plan) -> "Database":
        self.preview_plan = plan
        return self

    def with_region(self, region: Region) -> "Database":
        self.region = region
        return self

    def with_postgresql(self, version: PostgreSQLVersion) -> "Database":
        self.postgres_major_version = version
        return self

    def with_database_name(self, name: str) -> "Database":
        """Set the database name inside the server (distinct from the resource name)."""
        self.database_name = name
        return self

    def with_user(self, user: str) -> "Database":
        self.user = user
        return self

    def with_disk_size(self, size_gb: int) -> "Database":
        self.disk_size_gb = size_gb
        return self

    def with_preview_disk_size(self, size_gb: int) -> "Database":
        self.preview_disk_size_gb = size_gb
        return self

    def with_ip_allow_list(self, *args: IPAllow) -> "Database":
        self.ip_allow_list.extend(args)
        return self

    def with_ip_access(self, source: str, description: Optional[str] = None) -> "Database":
        return self.with_ip_allow_list(IPAllow(source=source, description=description))

    def with_public_access(self) -> "Database":
        """Allow connections from anywhere."""
        return self.with_ip_access("0.0.0.0/0", "public access")

    def with_private_access(self) -> "Database":
        """Block all external connections."""
        self.ip_allow_list = []
        return self

    def with_read_replicas(self, *args: str) -> "Database":
        self.read_replicas.extend(ReadReplica(name=name) for name in args)
        return self

    def with_high_availability(self) -> "Database":
        self.high_availability = HighAvailability(enabled=True)
        return self


@dataclass
class EnvVarGroup:
    """A named, shareable group of environment variables."""

    name: str = _req("name")
    env_vars: list[EnvVar] = _seq("envVars")

    def with_env_vars(self, *args: EnvVar) -> "EnvVarGroup":
        self.env_vars.extend(args)
        return self

    def with_env(self, key: str, value: str) -> "EnvVarGroup":
        return self.with_env_vars(env(key, value))

    def with_secret(self, key: str) -> "EnvVarGroup":
        return self.with_env_vars(env_secret(key))

    def with_generated(self, key: str) -> "EnvVarGroup":
        return self.with_env_vars(env_generated(key))


# Environment variable helpers


def env(key: str, value: str) -> EnvVar:
    """A plain key/value variable."""
    return EnvVar(key=key, value=value)


def env_from_database(key: str, db_name: str, property: DatabaseProperty) -> EnvVar:
    """A variable taken from a database property."""
    return EnvVar(key=key, from_database=FromDatabase(name=db_name, property=property))


def env_from_service(
    key: str,
    service_name: str,
    service_type: ServiceType,
    property: ServiceProperty,
) -> EnvVar:
    """A variable taken from a property of another service."""
    return EnvVar(
        key=key,
        from_service=FromService(name=service_name, type=service_type, property=property),
    )


def env_secret(key: str) -> EnvVar:
    """A variable whose value is prompted for (sync: false)."""
    return EnvVar(key=key, sync=False)


def env_generated(key: str) -> EnvVar:
    """A variable whose value is generated by the platform."""
    return EnvVar(key=key, generate_value=True)


def env_from_group(group_name: str) -> EnvVar:
    """A reference to a whole environment group."""
    return EnvVar(from_group=group_name)


# Conversion to and from plain data (dicts, lists, scalars)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def to_plain(obj: Any) -> Any:
    """Convert a model object into plain dicts, lists and scalars using blueprint keys."""
    if isinstance(obj, Enum):
        return obj.value
    if not isinstance(obj, type):
        custom = getattr(obj, "to_plain", None)
        if callable(custom):
            return custom()
    if is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, Any] = {}
        for f in fields(obj):
            key = f.metadata.get("yaml")
            if key is None:
                continue
            value = getattr(obj, f.name)
            omit = f.metadata.get("omit")
            if omit == "nil" and value is None:
                continue
            if omit == "empty" and _is_empty(value):
                continue
            out[key] = to_plain(value)
        return out
    if isinstance(obj, Mapping):
        return {key: to_plain(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(item) for item in obj]
    return obj


def _scalar_str(value: Any, where: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"{where}: cannot decode {value!r} as a string")


def _decode(tp: Any, value: Any, where: str) -> Any:
    origin = typing.get_origin(tp)
    if origin is Union or origin is _pytypes.UnionType:
        if value is None:
            return None
        tp = next(arg for arg in typing.get_args(tp) if arg is not type(None))
        origin = typing.get_origin(tp)

    if origin is list:
        if not isinstance(value, list):
            raise ValueError(f"{where}: expected a sequence, got {value!r}")
        (item_type,) = typing.get_args(tp)
        return [_decode(item_type, item, f"{where}[{n}]") for n, item in enumerate(value)]

    if isinstance(tp, type) and is_dataclass(tp):
        if not isinstance(value, Mapping):
            raise ValueError(f"{where}: expected a mapping, got {value!r}")
        kwargs: dict[str, Any] = {}
        for f in fields(tp):
            key = f.metadata.get("yaml")
            if key is None or key not in value or value[key] is None:
                continue
            kwargs[f.name] = _decode(f.type, value[key], f"{where}.{key}")
        return tp(**kwargs)

    if isinstance(tp, type) and issubclass(tp, Enum):
        text = _scalar_str(value, where)
        try:
            return tp(text)
        except ValueError:
            return text

    if tp is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{where}: expected a boolean, got {value!r}")
        return value

    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{where}: expected an integer, got {value!r}")
        return value

    if tp is str:
        return _scalar_str(value, where)

    return value


def from_plain(cls: type, data: Any) -> Any:
    """Build an instance of a model class from plain data; unknown keys are ignored."""
    if data is None:
        return None
    return _decode(cls, data, cls.__name__)