"""Live variable value contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias


class VariableType(StrEnum):
    COLOR = "COLOR"
    FLOAT = "FLOAT"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


@dataclass(frozen=True)
class Rgba:
    """Color with channels in the 0..1 range."""

    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass(frozen=True)
class VariableAlias:
    """Mode value that resolves to the variable with identity *id*."""

    id: str


Scalar: TypeAlias = Rgba | float | str | bool
ModeValue: TypeAlias = Scalar | VariableAlias


def conforms(value: ModeValue, variable_type: VariableType) -> bool:
    """Whether a raw *value* may be stored in a variable of *variable_type*.

    Aliases always conform here; hosts check the alias target's type separately.
    """
    if isinstance(value, VariableAlias):
        return True
    match variable_type:
        case VariableType.COLOR:
            return isinstance(value, Rgba)
        case VariableType.FLOAT:
            return isinstance(value, int | float) and not isinstance(value, bool)
        case VariableType.STRING:
            return isinstance(value, str)
        case VariableType.BOOLEAN:
            return isinstance(value, bool)


def default_scalar(variable_type: VariableType) -> Scalar:
    match variable_type:
        case VariableType.COLOR:
            return Rgba(0.0, 0.0, 0.0, 1.0)
        case VariableType.FLOAT:
            return 0.0
        case VariableType.STRING:
            return ""
        case VariableType.BOOLEAN:
            return False
