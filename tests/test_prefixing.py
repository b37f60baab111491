import copy

import pytest

from renderblueprint.blueprint import Blueprint
from renderblueprint.prefixing import (
    get_all_resource_names,
    get_external_references,
    prefix_blueprint,
    prefix_blueprint_with_separator,
)
from renderblueprint.types import (
    Database,
    DatabaseProperty,
    EnvVar,
    EnvVarGroup,
    FromDatabase,
    FromService,
    Service,
    ServiceType,
)


def _internal_refs_blueprint(prefix=""):
    return Blueprint(
        services=[
            Service(
                name=prefix + "api",
                type=ServiceType.WEB,
                env_vars=[
                    EnvVar(
                        key="DATABASE_URL",
                        from_database=FromDatabase(
                            name=prefix + "main-db",
                            property=DatabaseProperty.CONNECTION_STRING,
                        ),
                    ),
                    EnvVar(
                        key="CACHE_URL",
                        from_service=FromService(
                            name=prefix + "cache", type=ServiceType.KEY_VALUE
                        ),
                    ),
                    EnvVar(key="SHARED_VAR", from_group=prefix + "shared"),
                ],
            ),
            Service(name=prefix + "cache", type=ServiceType.KEY_VALUE),
        ],
        databases=[Database(name=prefix + "main-db")],
        env_var_groups=[
            EnvVarGroup(
                name=prefix + "shared",
                env_vars=[
                    EnvVar(
                        key="DB_URL",
                        from_database=FromDatabase(
                            name=prefix + "main-db",
                            property=DatabaseProperty.CONNECTION_STRING,
                        ),
                    )
                ],
            )
        ],
    )


def _external_blueprint(service_name):
    return Blueprint(
        services=[
            Service(
                name=service_name,
                type=ServiceType.WEB,
                env_vars=[
                    EnvVar(
                        key="EXTERNAL_DB_URL",
                        from_database=FromDatabase(
                            name="external-db",
                            property=DatabaseProperty.CONNECTION_STRING,
                        ),
                    )
                ],
            )
        ]
    )


@pytest.mark.parametrize(
    "blueprint, prefix, expected",
    [
        (None, "test-", Blueprint()),
        (
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
            "",
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
        ),
        (
            Blueprint(
                services=[
                    Service(name="api", type=ServiceType.WEB),
                    Service(name="worker", type=ServiceType.WORKER),
                ],
                databases=[Database(name="main-db"), Database(name="cache-db")],
                env_var_groups=[EnvVarGroup(name="shared"), EnvVarGroup(name="secrets")],
            ),
            "team1-",
            Blueprint(
                services=[
                    Service(name="team1-api", type=ServiceType.WEB),
                    Service(name="team1-worker", type=ServiceType.WORKER),
                ],
                databases=[
                    Database(name="team1-main-db"),
                    Database(name="team1-cache-db"),
                ],
                env_var_groups=[
                    EnvVarGroup(name="team1-shared"),
                    EnvVarGroup(name="team1-secrets"),
                ],
            ),
        ),
        (_internal_refs_blueprint(), "prod-", _internal_refs_blueprint("prod-")),
        (_external_blueprint("api"), "team-", _external_blueprint("team-api")),
    ],
    ids=["nil", "empty-prefix", "all-resources", "internal-refs", "external-refs"],
)
def test_prefix_blueprint(blueprint, prefix, expected):
    snapshot = copy.deepcopy(blueprint)
    result = prefix_blueprint(blueprint, prefix)
    assert result == expected
    assert blueprint == snapshot


def test_prefix_blueprint_with_separator():
    blueprint = Blueprint(services=[Service(name="api", type=ServiceType.WEB)])
    assert prefix_blueprint_with_separator(blueprint, "team", "").services[0].name == "team-api"
    assert prefix_blueprint_with_separator(blueprint, "team", "_").services[0].name == "team_api"


@pytest.mark.parametrize(
    "blueprint, expected",
    [
        (None, ([], [], [])),
        (Blueprint(), ([], [], [])),
        (
            Blueprint(
                services=[Service(name="api"), Service(name="worker")],
                databases=[Database(name="main-db"), Database(name="cache-db")],
                env_var_groups=[EnvVarGroup(name="shared"), EnvVarGroup(name="secrets")],
            ),
            (["api", "worker"], ["main-db", "cache-db"], ["shared", "secrets"]),
        ),
    ],
    ids=["nil", "empty", "all"],
)
def test_get_all_resource_names(blueprint, expected):
    assert get_all_resource_names(blueprint) == expected


@pytest.mark.parametrize(
    "blueprint, expected",
    [
        (None, ([], [], [])),
        (
            Blueprint(
                services=[
                    Service(
                        name="api",
                        env_vars=[
                            EnvVar(key="DB_URL", from_database=FromDatabase(name="main-db"))
                        ],
                    )
                ],
                databases=[Database(name="main-db")],
            ),
            ([], [], []),
        ),
        (
            Blueprint(
                services=[
                    Service(
                        name="api",
                        env_vars=[
                            EnvVar(
                                key="EXTERNAL_DB_URL",
                                from_database=FromDatabase(name="external-db"),
                            ),
                            EnvVar(
                                key="CACHE_URL",
                                from_service=FromService(name="external-cache"),
                            ),
                            EnvVar(key="SHARED_VAR", from_group="external-env"),
                        ],
                    )
                ],
                databases=[Database(name="main-db")],
            ),
            (["external-cache"], ["external-db"], ["external-env"]),
        ),
        (
            Blueprint(
                env_var_groups=[
                    EnvVarGroup(
                        name="shared",
                        env_vars=[
                            EnvVar(
                                key="EXTERNAL_DB_URL",
                                from_database=FromDatabase(name="external-db"),
                            )
                        ],
                    )
                ]
            ),
            ([], ["external-db"], []),
        ),
    ],
    ids=["nil", "none", "in-services", "in-groups"],
)
def test_get_external_references(blueprint, expected):
    result = get_external_references(blueprint)
    assert tuple(sorted(names) for names in result) == expected


def test_external_references_are_unique():
    blueprint = Blueprint(
        services=[
            Service(
                name="a",
                env_vars=[EnvVar(key="X", from_group="ext"), EnvVar(key="Y", from_group="ext")],
            )
        ]
    )
    assert get_external_references(blueprint)[2] == ["ext"]