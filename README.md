# renderblueprint

Describe the services, databases and environment variable groups of a
`render.yaml` blueprint in Python, then validate, combine, prefix and write it
out as YAML, or load an existing file back into Python objects.

## Installation

```
pip install renderblueprint
```

## Building a blueprint

Every resource has a chainable builder. Service builders (`WebService`,
`BackgroundWorker`, `PrivateService`, `CronJob`, `StaticSite`,
`KeyValueService`) are turned into generic `Service` entries when they are
added to a blueprint with `Blueprint.with_services`.

```python
from renderblueprint.blueprint import Blueprint
from renderblueprint.services import WebService, BackgroundWorker
from renderblueprint.sites import CronJob, KeyValueService, StaticSite
from renderblueprint.types import (
    Database, DatabaseProperty, EnvVarGroup, Plan, PostgreSQLVersion,
    PreviewGeneration, Region, Runtime, ServiceProperty, ServiceType,
    env, env_from_database, env_from_service, env_secret,
)

api = (
    WebService("api", Runtime.NODE)
    .with_domains("api.example.com")
    .with_git("https://example.com/repos/api.git", "main")
    .with_build("npm install")
    .with_start_command("npm start")
    .with_auto_scaling(2, 10, 70)
    .with_health_check("/health")
    .with_env_vars(
        env("NODE_ENV", "production"),
        env_from_database("DATABASE_URL", "main-db", DatabaseProperty.CONNECTION_STRING),
        env_from_service("CACHE_URL", "cache", ServiceType.KEY_VALUE,
                         ServiceProperty.CONNECTION_STRING),
        env_secret("JWT_SECRET"),
    )
)

worker = (
    BackgroundWorker("worker", Runtime.PYTHON)
    .with_start_command("python worker.py")
    .with_plan(Plan.STARTER)
)

cleanup = CronJob("cleanup", Runtime.NODE, "0 2 * * *").with_start_command("npm run cleanup")

db = (
    Database("main-db")
    .with_plan(Plan.PRO_8GB)
    .with_postgresql(PostgreSQLVersion.POSTGRESQL_16)
    .with_region(Region.OREGON)
    .with_high_availability()
    .with_read_replicas("main-db-replica")
)

cache = KeyValueService("cache").with_plan(Plan.FREE).with_public_access()
site = StaticSite("frontend").with_publish_path("./dist").with_build("npm run build")
shared = EnvVarGroup("shared").with_env("LOG_LEVEL", "info").with_secret("API_KEY")

bp = (
    Blueprint()
    .with_services(api, worker, cleanup, cache, site)
    .with_databases(db)
    .with_env_var_groups(shared)
    .with_previews(PreviewGeneration.AUTOMATIC, 7)
)

print(bp.to_yaml_string())
```

`with_databases` and `with_env_var_groups` store copies, so later changes to
the builder objects do not reach the blueprint.

Static sites (web services with the `static` runtime and a publish path) are
written in the static-site layout of the render.yaml schema; fields that
layout does not allow, such as `region`, are left out.

`Blueprint.to_plain()` gives the same document as plain dicts and lists,
`to_yaml_bytes()` gives it UTF-8 encoded, and `Blueprint.from_plain()` builds a
blueprint from such data. `find_service`, `find_database` and
`find_env_var_group` look resources up by name and return `None` when absent.

## Validating and combining

```python
from renderblueprint.operations import (
    copy_blueprint, find_conflicts, merge_blueprints, validate_blueprint,
)
from renderblueprint.prefixing import (
    get_all_resource_names, get_external_references,
    prefix_blueprint, prefix_blueprint_with_separator,
)

problems = validate_blueprint(bp)          # list of messages, empty when valid

team = prefix_blueprint(bp, "team1-")       # renames resources and internal references
also_team = prefix_blueprint_with_separator(bp, "team1", "-")

clashes = find_conflicts(bp, team)          # names defined in both
merged = merge_blueprints(bp, team)         # raises MergeConflictError on name clashes

services, databases, groups = get_all_resource_names(bp)
ext_services, ext_databases, ext_groups = get_external_references(bp)
```

`validate_blueprint` reports duplicate names, services without a name or
type, services other than key-value stores without a runtime, and databases
or environment groups without a name.

`merge_blueprints` appends the overlay's resources after the base's; the
overlay's preview settings win when it has them. `MergeConflictError`
carries the list of clashes in its `conflicts` attribute.

`prefix_blueprint` leaves references to resources that the blueprint does not
define untouched, so shared external resources keep working after prefixing.
Read replica names that start with their database's old name are renamed
along with it.

## Reading and writing files

```python
from renderblueprint.yamlio import (
    load_from_file, load_render_yaml, load_render_yaml_from,
    write_render_yaml, write_render_yaml_to, write_to_file, write_with_backup,
)

write_render_yaml_to(bp, "deploy")            # deploy/render.yaml
write_with_backup(bp, "deploy/render.yaml")   # keeps deploy/render.yaml.backup
loaded = load_render_yaml_from("deploy")
```

Writing validates the blueprint first and raises `BlueprintValidationError`
(with the problems in its `errors` attribute) instead of writing an invalid
file. Parent directories are created as needed. Loading a file that is not
valid YAML raises `ValueError`.

## What it does not do

The package is a library only: it has no command-line program, and it does
not talk to any hosting service or deploy anything. Validation covers the
checks listed above; it does not check a document against the full
render.yaml JSON schema.