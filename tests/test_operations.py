import pytest

from renderblueprint.blueprint import Blueprint
from renderblueprint.operations import (
    MergeConflictError,
    copy_blueprint,
    find_conflicts,
    merge_blueprints,
    validate_blueprint,
)
from renderblueprint.types import (
    Database,
    EnvVar,
    EnvVarGroup,
    Plan,
    Previews,
    Runtime,
    Service,
    ServiceType,
)


@pytest.mark.parametrize(
    "base, overlay, expected",
    [
        (None, None, Blueprint()),
        (
            None,
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
        ),
        (
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
            None,
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
        ),
        (
            Blueprint(
                services=[Service(name="api", type=ServiceType.WEB)],
                databases=[Database(name="main-db")],
            ),
            Blueprint(
                services=[Service(name="worker", type=ServiceType.WORKER)],
                env_var_groups=[
                    EnvVarGroup(
                        name="shared",
                        env_vars=[EnvVar(key="NODE_ENV", value="production")],
                    )
                ],
            ),
            Blueprint(
                services=[
                    Service(name="api", type=ServiceType.WEB),
                    Service(name="worker", type=ServiceType.WORKER),
                ],
                databases=[Database(name="main-db")],
                env_var_groups=[
                    EnvVarGroup(
                        name="shared",
                        env_vars=[EnvVar(key="NODE_ENV", value="production")],
                    )
                ],
            ),
        ),
        (
            Blueprint(
                previews=Previews(generation="automatic"), previews_expire_after_days=30
            ),
            Blueprint(previews=Previews(generation="none"), previews_expire_after_days=7),
            Blueprint(previews=Previews(generation="none"), previews_expire_after_days=7),
        ),
    ],
    ids=["nil", "nil-base", "nil-overlay", "no-conflicts", "overlay-previews-win"],
)
def test_merge_blueprints(base, overlay, expected):
    assert merge_blueprints(base, overlay) == expected


def test_merge_with_conflicts_fails():
    base = Blueprint(services=[Service(name="api", type=ServiceType.WEB)])
    overlay = Blueprint(services=[Service(name="api", type=ServiceType.WORKER)])
    with pytest.raises(MergeConflictError) as info:
        merge_blueprints(base, overlay)
    assert info.value.conflicts == ["service name conflict: api"]


def test_merge_keeps_base_previews_when_overlay_has_none():
    base = Blueprint(previews=Previews(generation="automatic"), previews_expire_after_days=30)
    merged = merge_blueprints(base, Blueprint())
    assert merged.previews == Previews(generation="automatic")
    assert merged.previews_expire_after_days == 30


def test_copy_blueprint():
    original = Blueprint(
        services=[
            Service(
                name="api",
                type=ServiceType.WEB,
                env_vars=[EnvVar(key="NODE_ENV", value="production")],
            )
        ],
        databases=[Database(name="main-db", plan=Plan.BASIC_1GB)],
        env_var_groups=[
            EnvVarGroup(name="shared", env_vars=[EnvVar(key="LOG_LEVEL", value="info")])
        ],
        previews=Previews(generation="automatic"),
        previews_expire_after_days=7,
    )
    copied = copy_blueprint(original)
    assert copied == original

    copied.services[0].name = "modified-api"
    copied.databases[0].name = "modified-db"
    copied.env_var_groups[0].name = "modified-shared"
    assert original.services[0].name == "api"
    assert original.databases[0].name == "main-db"
    assert original.env_var_groups[0].name == "shared"


def test_copy_none_gives_empty_blueprint():
    assert copy_blueprint(None) == Blueprint()


@pytest.mark.parametrize(
    "blueprint, expected",
    [
        (None, ["blueprint is nil"]),
        (
            Blueprint(
                services=[Service(name="api", type=ServiceType.WEB, runtime=Runtime.NODE)],
                databases=[Database(name="main-db")],
                env_var_groups=[EnvVarGroup(name="shared")],
            ),
            [],
        ),
        (
            Blueprint(
                services=[
                    Service(name="api", type=ServiceType.WEB, runtime=Runtime.NODE),
                    Service(name="api", type=ServiceType.WORKER, runtime=Runtime.PYTHON),
                ]
            ),
            ["duplicate service name: api"],
        ),
        (
            Blueprint(databases=[Database(name="db"), Database(name="db")]),
            ["duplicate database name: db"],
        ),
        (
            Blueprint(env_var_groups=[EnvVarGroup(name="shared"), EnvVarGroup(name="shared")]),
            ["duplicate environment group name: shared"],
        ),
        (
            Blueprint(
                services=[
                    Service(name="", type=ServiceType.WEB, runtime=Runtime.NODE),
                    Service(name="api", type="", runtime=Runtime.NODE),
                    Service(name="web", type=ServiceType.WEB),
                ],
                databases=[Database(name="")],
                env_var_groups=[EnvVarGroup(name="")],
            ),
            [
                "service missing name",
                "service api missing type",
                "service web missing runtime",
                "database missing name",
                "environment group missing name",
            ],
        ),
        (Blueprint(services=[Service(name="cache", type=ServiceType.KEY_VALUE)]), []),
    ],
    ids=[
        "nil",
        "valid",
        "dup-services",
        "dup-databases",
        "dup-groups",
        "missing-fields",
        "keyvalue-no-runtime",
    ],
)
def test_validate_blueprint(blueprint, expected):
    assert validate_blueprint(blueprint) == expected


@pytest.mark.parametrize(
    "base, overlay, expected",
    [
        (None, None, []),
        (
            Blueprint(
                services=[Service(name="api", type=ServiceType.WEB)],
                databases=[Database(name="main-db")],
                env_var_groups=[EnvVarGroup(name="shared")],
            ),
            Blueprint(
                services=[Service(name="worker", type=ServiceType.WORKER)],
                databases=[Database(name="cache-db")],
                env_var_groups=[EnvVarGroup(name="secrets")],
            ),
            [],
        ),
        (
            Blueprint(services=[Service(name="api", type=ServiceType.WEB)]),
            Blueprint(services=[Service(name="api", type=ServiceType.WORKER)]),
            ["service name conflict: api"],
        ),
        (
            Blueprint(databases=[Database(name="main-db")]),
            Blueprint(databases=[Database(name="main-db")]),
            ["database name conflict: main-db"],
        ),
        (
            Blueprint(env_var_groups=[EnvVarGroup(name="shared")]),
            Blueprint(env_var_groups=[EnvVarGroup(name="shared")]),
            ["environment group name conflict: shared"],
        ),
        (
            Blueprint(
                services=[Service(name="api", type=ServiceType.WEB)],
                databases=[Database(name="db")],
            ),
            Blueprint(
                services=[Service(name="api", type=ServiceType.WORKER)],
                databases=[Database(name="db")],
            ),
            ["service name conflict: api", "database name conflict: db"],
        ),
    ],
    ids=["nil", "none", "services", "databases", "groups", "multiple"],
)
def test_find_conflicts(base, overlay, expected):
    assert sorted(find_conflicts(base, overlay)) == sorted(expected)