from __future__ import annotations

from typing import Optional, Any, Union

import msgspec

# region Base Objects


class ApiBase(msgspec.Struct):
    """
    Base object for all API query returns (a top-level JSON:API document).
    """
    data: Union[ResourceData, list[ResourceData], None] = None
    included: list[ResourceData] = msgspec.field(default_factory=list)
    meta: Optional[dict] = None
    links: Optional[dict] = None


class ResourceIdentifier(msgspec.Struct, frozen=True):
    """
    Linkage entry of a relationship, e.g. {"type": "people", "id": "9"}.
    """
    type: str
    id: str
    meta: Optional[dict] = None


class RelationshipData(msgspec.Struct):
    # 'data' may be missing entirely for links-only relationships
    data: Union[ResourceIdentifier, list[ResourceIdentifier], None] = None
    links: Optional[dict] = None
    meta: Optional[dict] = None


class ResourceData(msgspec.Struct):
    """
    Base class for API 'data' and 'included' entries (generic attributes dict).
    Members other than the ones below (e.g. "lid", extension members) are ignored.
    """
    type: str
    id: str
    attributes: dict = msgspec.field(default_factory=dict)
    relationships: Optional[dict[str, RelationshipData]] = None
    meta: Optional[Any] = None
    links: Optional[dict] = None


# endregion
