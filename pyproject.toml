[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "renderblueprint"
version = "0.1.0"
description = "Build, combine, validate and write render.yaml blueprints from Python."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["render", "blueprint", "render.yaml", "infrastructure-as-code", "yaml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["renderblueprint"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
