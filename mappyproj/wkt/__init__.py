from mappyproj.wkt.parser import parse_wkt
from mappyproj.wkt.writer import to_wkt

__all__ = ["parse_wkt", "to_wkt"]
