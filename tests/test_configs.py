import pytest

from renderblueprint.configs import (
    BuildConfig,
    DockerConfig,
    GitConfig,
    KeyValueConfig,
    PreviewConfig,
    ScalingConfig,
    StaticSiteConfig,
)
from renderblueprint.types import (
    BuildFilter,
    DockerImage,
    Plan,
    Scaling,
    Service,
    ServicePreviews,
    ServiceType,
    to_plain,
)


@pytest.fixture
def service():
    return Service(name="api", type=ServiceType.WEB)


def test_git_apply_sets_repo_and_branch(service):
    GitConfig(repo="https://github.com/example/api", branch="main").apply_to(service)
    assert service.repo == "https://github.com/example/api"
    assert service.branch == "main"


def test_git_apply_overwrites_with_none(service):
    service.branch = "develop"
    GitConfig(repo="r").apply_to(service)
    assert service.branch is None
    assert service.repo == "r"


def test_build_apply(service):
    bf = BuildFilter(paths=["src/**"])
    BuildConfig(
        build_command="npm install",
        pre_deploy_command="npm run migrate",
        build_filter=bf,
        root_dir="app",
        auto_deploy=False,
    ).apply_to(service)
    assert service.build_command == "npm install"
    assert service.pre_deploy_command == "npm run migrate"
    assert service.build_filter is bf
    assert service.root_dir == "app"
    assert service.auto_deploy is False


def test_docker_apply(service):
    image = DockerImage(url="docker.io/example/api:latest")
    DockerConfig(
        dockerfile_path="./Dockerfile", docker_context=".", image=image
    ).apply_to(service)
    assert service.dockerfile_path == "./Dockerfile"
    assert service.docker_context == "."
    assert service.image == image
    assert service.docker_command is None


def test_scaling_apply(service):
    scaling = Scaling(min_instances=2, max_instances=10)
    ScalingConfig(num_instances=3, scaling=scaling).apply_to(service)
    assert service.num_instances == 3
    assert service.scaling == scaling


def test_preview_apply(service):
    PreviewConfig(
        previews=ServicePreviews(generation="automatic"), preview_plan=Plan.STARTER
    ).apply_to(service)
    assert service.previews == ServicePreviews(generation="automatic")
    assert service.preview_plan == Plan.STARTER


def test_git_config_plain_omits_missing_branch():
    assert to_plain(GitConfig(repo="r")) == {"repo": "r"}


def test_static_site_config_always_has_publish_path():
    assert to_plain(StaticSiteConfig()) == {"staticPublishPath": ""}


def test_key_value_config_always_has_ip_allow_list():
    assert to_plain(KeyValueConfig()) == {"ipAllowList": []}


def test_configs_do_not_share_lists():
    a = StaticSiteConfig()
    b = StaticSiteConfig()
    a.headers.append("x")
    assert b.headers == []