from enum import Enum

class Op(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"

class Rarity(str, Enum):
    COMMON = "common"
    RARE   = "rare"
    EPIC   = "epic"

class EffectType(str, Enum):
    DOUBLE     = "double"
    TIME_BONUS = "time_bonus"
    ADD_TIME   = "add_time"
