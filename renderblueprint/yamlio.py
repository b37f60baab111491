"""Reading and writing blueprints as render.yaml files."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional, Union

import yaml

from renderblueprint.blueprint import Blueprint
from renderblueprint.operations import validate_blueprint

__all__ = [
    "BlueprintValidationError",
    "write_to_file",
    "write_render_yaml",
    "write_render_yaml_to",
    "write_with_backup",
    "load_from_file",
    "load_render_yaml",
    "load_render_yaml_from",
]

PathLike = Union[str, "os.PathLike[str]"]

RENDER_YAML = "render.yaml"


class BlueprintValidationError(ValueError):
    """Raised when a blueprint fails validation before being written."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("blueprint validation failed: " + "; ".join(self.errors))


def write_to_file(blueprint: Optional[Blueprint], path: PathLike) -> None:
    """Validate the blueprint and write it as YAML, creating parent directories."""
    if blueprint is None:
        raise ValueError("blueprint is nil")
    errors = validate_blueprint(blueprint)
    if errors:
        raise BlueprintValidationError(errors)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(blueprint.to_yaml_bytes())


def write_render_yaml(blueprint: Optional[Blueprint]) -> None:
    """Write render.yaml in the current directory."""
    write_to_file(blueprint, RENDER_YAML)


def write_render_yaml_to(blueprint: Optional[Blueprint], directory: PathLike) -> None:
    """Write render.yaml in the given directory."""
    write_to_file(blueprint, Path(directory) / RENDER_YAML)


def write_with_backup(blueprint: Optional[Blueprint], path: PathLike) -> None:
    """Write the blueprint, first copying an existing file to '<path>.backup'."""
    target = Path(path)
    if target.exists():
        shutil.copyfile(target, Path(str(target) + ".backup"))
    write_to_file(blueprint, target)


def load_from_file(path: PathLike) -> Blueprint:
    """Load a blueprint from a YAML file."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to unmarshal YAML from {path}: {exc}") from exc
    return Blueprint.from_plain(data)


def load_render_yaml() -> Blueprint:
    """Load render.yaml from the current directory."""
    return load_from_file(RENDER_YAML)


def load_render_yaml_from(directory: PathLike) -> Blueprint:
    """Load render.yaml from the given directory."""
    return load_from_file(Path(directory) / RENDER_YAML)