"""Build, validate, combine, prefix, read and write render.yaml blueprints."""

__version__ = "0.1.0"

__all__ = [
    "blueprint",
    "configs",
    "operations",
    "prefixing",
    "services",
    "sites",
    "types",
    "yamlio",
]