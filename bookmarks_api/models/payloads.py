"""
Request payload normalization

Clients send loosely typed bodies and query strings, some still using the
field names of the first API version. Each operation gets an explicit input
model built by ``normalize_payload``, which maps legacy names onto canonical
ones, coerces every value to a trimmed string and records which fields were
not supplied at all.
"""
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel

# canonical field -> accepted names, in order of preference
Aliases = Dict[str, Tuple[str, ...]]

BOOKMARK_CREATE_ALIASES: Aliases = {
    "title": ("title", "name"),
    "url": ("url", "link"),
    "group_id": ("group_id", "groupId"),
}

BOOKMARK_UPDATE_ALIASES: Aliases = {
    "title": ("title", "name"),
    "url": ("url", "link"),
    "group_id": ("groupId", "group_id"),
    "bookmark_id": ("bookmarkId", "id"),
}

BOOKMARK_MOVE_ALIASES: Aliases = {
    "from_group_id": ("fromGroupId",),
    "to_group_id": ("toGroupId",),
    "bookmark_id": ("bookmarkId",),
    "position": ("position",),
}

BOOKMARK_DELETE_ALIASES: Aliases = {
    "group_id": ("groupId", "g_id"),
    "bookmark_id": ("bookmarkId", "id"),
}

GROUP_CREATE_ALIASES: Aliases = {"name": ("name", "groupName")}

GROUP_UPDATE_ALIASES: Aliases = {
    "group_id": ("groupId", "group_id"),
    "name": ("name", "groupName"),
}

GROUP_DELETE_ALIASES: Aliases = {"group_id": ("groupId", "group_id")}


def is_valid_id(value: str) -> bool:
    """Ids become Firestore path segments, so they may not split or climb the path"""
    return "/" not in value and value not in (".", "..")


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return str(value).strip()


def normalize_payload(raw: Optional[Mapping[str, Any]], aliases: Aliases) -> Tuple[Dict[str, str], List[str]]:
    """
    Map a raw body or query mapping onto canonical field names

    Args:
        raw: Request body / query parameters (anything dict-like, or None)
        aliases: canonical name -> accepted names, first match wins

    Returns:
        (values, defaulted): trimmed string values for every canonical
        field, and the canonical names that were absent and defaulted to ""
    """
    raw = raw or {}
    values: Dict[str, str] = {}
    defaulted: List[str] = []
    for canonical, names in aliases.items():
        for name in names:
            if name in raw and raw[name] is not None:
                values[canonical] = coerce_text(raw[name])
                break
        else:
            values[canonical] = ""
            defaulted.append(canonical)
    return values, defaulted


class NormalizedInput(BaseModel):
    """Base for per-operation inputs"""
    defaulted: List[str] = []

    # fields that must be non-blank; subclasses override
    required: ClassVar[Tuple[str, ...]] = ()
    # fields used as document ids
    id_fields: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def aliases(cls) -> Aliases:
        raise NotImplementedError

    @classmethod
    def from_payload(cls, raw: Optional[Mapping[str, Any]]):
        values, defaulted = normalize_payload(raw, cls.aliases())
        return cls(defaulted=defaulted, **values)

    def missing_fields(self) -> List[str]:
        """Blank required fields, then ids that cannot be used as a path segment"""
        missing = [name for name in self.required if not getattr(self, name)]
        for name in self.id_fields:
            if name not in missing and not is_valid_id(getattr(self, name)):
                missing.append(name)
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()


class BookmarkCreateInput(NormalizedInput):
    title: str = ""
    url: str = ""
    group_id: str = ""
    required: ClassVar[Tuple[str, ...]] = ("title", "url", "group_id")
    id_fields: ClassVar[Tuple[str, ...]] = ("group_id",)

    @classmethod
    def aliases(cls) -> Aliases:
        return BOOKMARK_CREATE_ALIASES


class BookmarkUpdateInput(NormalizedInput):
    title: str = ""
    url: str = ""
    group_id: str = ""
    bookmark_id: str = ""
    required: ClassVar[Tuple[str, ...]] = ("title", "url", "group_id", "bookmark_id")
    id_fields: ClassVar[Tuple[str, ...]] = ("group_id", "bookmark_id")

    @classmethod
    def aliases(cls) -> Aliases:
        return BOOKMARK_UPDATE_ALIASES


class BookmarkMoveInput(NormalizedInput):
    from_group_id: str = ""
    to_group_id: str = ""
    bookmark_id: str = ""
    position: str = ""
    required: ClassVar[Tuple[str, ...]] = ("from_group_id", "to_group_id", "bookmark_id", "position")
    id_fields: ClassVar[Tuple[str, ...]] = ("from_group_id", "to_group_id", "bookmark_id")

    @classmethod
    def aliases(cls) -> Aliases:
        return BOOKMARK_MOVE_ALIASES

    @property
    def target_position(self) -> Optional[int]:
        """Parsed position, or None unless it is an integer >= 0"""
        try:
            position = int(self.position, 10)
        except ValueError:
            return None
        return position if position >= 0 else None

    def missing_fields(self) -> List[str]:
        missing = super().missing_fields()
        if "position" not in missing and self.target_position is None:
            missing.append("position")
        return missing


class BookmarkDeleteInput(NormalizedInput):
    group_id: str = ""
    bookmark_id: str = ""
    required: ClassVar[Tuple[str, ...]] = ("group_id", "bookmark_id")
    id_fields: ClassVar[Tuple[str, ...]] = ("group_id", "bookmark_id")

    @classmethod
    def aliases(cls) -> Aliases:
        return BOOKMARK_DELETE_ALIASES


class GroupCreateInput(NormalizedInput):
    name: str = ""
    required: ClassVar[Tuple[str, ...]] = ("name",)

    @classmethod
    def aliases(cls) -> Aliases:
        return GROUP_CREATE_ALIASES


class GroupUpdateInput(NormalizedInput):
    group_id: str = ""
    name: str = ""
    required: ClassVar[Tuple[str, ...]] = ("group_id", "name")
    id_fields: ClassVar[Tuple[str, ...]] = ("group_id",)

    @classmethod
    def aliases(cls) -> Aliases:
        return GROUP_UPDATE_ALIASES


class GroupDeleteInput(NormalizedInput):
    group_id: str = ""
    required: ClassVar[Tuple[str, ...]] = ("group_id",)
    id_fields: ClassVar[Tuple[str, ...]] = ("group_id",)

    @classmethod
    def aliases(cls) -> Aliases:
        return GROUP_DELETE_ALIASES
