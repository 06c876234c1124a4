from pathlib import Path

from mappyproj.factories.crs_factory import from_authority_code, from_wkt
from mappyproj.factories.transformation_factory import create_transformation

__version__ = "0.1.0"

__all__ = [
    "create_transformation",
    "from_authority_code",
    "from_wkt",
    "package_root",
]


def package_root() -> Path:
    return Path(__file__).parent
