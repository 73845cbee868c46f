import enum


# Any values added here must also be added to the DB via a migration
class FRAMEWORK(enum.Enum):
    P5JS = "p5js"
    THREEJS = "threejs"
    SVG = "svg"


class WINNER(enum.Enum):
    A = "A"
    B = "B"
    TIE = "TIE"


class PROMPT_STATUS(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"
    ARCHIVED = "archived"


class TREND(enum.Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


DEFAULT_ELO_SCORE = 1000
