from enum import Enum, auto


class BackendType(Enum):
    CPU = auto()
    PYTHON = auto()


class NormalizationMode(Enum):
    GLOBAL = auto()
    PER_CHUNK = auto()
    NONE = auto()
