from .crs import tag_crs, reproject, to_target_crs
from .utils import clean_geometries

__all__ = [
    "tag_crs", "reproject", "to_target_crs",
    "clean_geometries",
]
