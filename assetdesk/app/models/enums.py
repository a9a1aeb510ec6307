# app/models/enums.py
"""Domain enumerations shared by entities, transfer objects and filters.

Values are persisted as integers, so their numeric order is also the sort
order in SQL and in memory.
"""

from enum import IntEnum


class Location(IntEnum):
    HA_NOI = 1
    HO_CHI_MINH = 2
    DA_NANG = 3


class Gender(IntEnum):
    FEMALE = 1
    MALE = 2


class Role(IntEnum):
    ADMIN = 1
    STAFF = 2


class AssetState(IntEnum):
    AVAILABLE = 1
    NOT_AVAILABLE = 2
    ASSIGNED = 3
    WAITING_FOR_RECYCLING = 4
    RECYCLED = 5


class AssignmentState(IntEnum):
    WAITING_FOR_ACCEPTANCE = 1
    ACCEPTED = 2
    DECLINED = 3

    @property
    def is_terminal(self) -> bool:
        return self in (AssignmentState.ACCEPTED, AssignmentState.DECLINED)


class ReturnRequestState(IntEnum):
    WAITING_FOR_RETURNING = 1
    COMPLETED = 2


def parse_enum(enum_cls, value):
    """Coerce an int, digit string or member name (any case) into ``enum_cls``.

    Names are compared with underscores removed, so ``HaNoi``, ``ha_noi`` and
    ``1`` all resolve to ``Location.HA_NOI``. Returns ``None`` for empty input.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.lstrip("-").isdigit():
            return enum_cls(int(text))
        wanted = text.replace("_", "").lower()
        for member in enum_cls:
            if member.name.replace("_", "").lower() == wanted:
                return member
        raise ValueError(f"'{value}' is not a valid {enum_cls.__name__}")
    return enum_cls(value)
