from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

READ_WRITE = "R/W"


@dataclass(frozen=True)
class Value:
    number: str  # bit pattern, e.g. "01"
    brief: str


@dataclass(frozen=True)
class Bitfield:
    name: str
    start: int  # msb, inclusive
    stop: int  # lsb, inclusive
    access: str
    reset: str
    description: Optional[str] = None
    values: tuple[Value, ...] = ()

    @property
    def width(self) -> int:
        return self.start - self.stop + 1

    @property
    def writable(self) -> bool:
        return self.access == READ_WRITE


@dataclass(frozen=True)
class Register:
    name: str
    address: str  # documentation only, never parsed
    reset: str
    description: Optional[str] = None
    bitfields: tuple[Bitfield, ...] = ()


@dataclass(frozen=True)
class Device:
    name: str
    registers: tuple[Register, ...] = ()
