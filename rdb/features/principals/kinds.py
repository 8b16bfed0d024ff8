import enum


class PrincipalKind(str, enum.Enum):
    USER = "user"
    GROUP = "group"
