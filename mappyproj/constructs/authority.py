from __future__ import annotations

from typing import NamedTuple, Optional, Union


class Authority(NamedTuple):
    """
    An organization-assigned identity for a CRS component, e.g. ("EPSG", "4326").

    Attributes:
        name: The authority name (e.g. "EPSG")
        code: The code as text; WKT carries codes as strings
    """

    name: str
    code: str

    def __str__(self):
        return f"{self.name}:{self.code}"

    @classmethod
    def epsg(cls, code: Union[int, str]) -> Authority:
        return cls("EPSG", str(code))

    def matches(self, other: Optional[Authority]) -> bool:
        """
        Check whether two authorities identify the same thing.

        Authority names are compared case-insensitively.
        """
        if other is None:
            return False
        return self.name.upper() == other.name.upper() and str(self.code) == str(
            other.code
        )
