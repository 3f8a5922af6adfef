__version__ = "0.1.0"

from .settings import (
    configure_logging,
    get_default_crs,
    set_default_crs,
    get_key_policy,
    set_key_policy,
)

__all__ = [
    "configure_logging",
    "get_default_crs",
    "set_default_crs",
    "get_key_policy",
    "set_key_policy",
    "build_region_table",
    "load_attribute_table",
    "load_geometry_table",
]

import logging
logging.getLogger("censusmap").addHandler(logging.NullHandler())

def __getattr__(name: str):
    if name == "build_region_table":
        from .app.regions import build_region_table
        return build_region_table
    if name == "load_attribute_table":
        from .infra.adapters.attributes import load_attribute_table
        return load_attribute_table
    if name == "load_geometry_table":
        from .infra.adapters.geometries import load_geometry_table
        return load_geometry_table
    raise AttributeError(f"module 'censusmap' has no attribute {name}")

def __dir__():
    return sorted(list(globals().keys()) + __all__)
