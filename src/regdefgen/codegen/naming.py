from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from regdefgen.regdef.model import Bitfield, Device, Register, Value
from regdefgen.utils.logger import get_logger

log = get_logger(__name__)

NO_SETTER = "_"

# Greedy on purpose: first <TABLE to last </TABLE>. Nested or unbalanced
# markup is not handled.
_TABLE_RE = re.compile(r"<TABLE.*</TABLE>", re.DOTALL)
_HEX_RE = re.compile(r"(?:0[xX])?([0-9A-Fa-f]+)")


@dataclass(frozen=True)
class FieldLayout:
    getter: str
    setter: str
    bit_range: str
    doc_lines: tuple[str, ...]
    values: tuple[Value, ...]
    reset: str


@dataclass(frozen=True)
class RegisterLayout:
    raw_name: str
    type_name: str
    address: str
    doc_lines: tuple[str, ...]
    reset_literal: str
    fields: tuple[FieldLayout, ...]


def struct_name(raw: str) -> str:
    """FREQ_OFF -> FreqOff"""
    return "".join(seg[:1].upper() + seg[1:].lower() for seg in raw.split("_"))


def accessor_names(bitfield: Bitfield) -> tuple[str, str]:
    getter = bitfield.name.lower()
    setter = "set_" + getter if bitfield.writable else NO_SETTER
    return getter, setter


def bit_range(start: int, stop: int) -> str:
    if start < stop:
        raise ValueError(f"start bit {start} below stop bit {stop}")
    if start == stop:
        return str(start)
    return f"{start}, {stop}"


def reset_literal(raw: str) -> str:
    """Normalize a vendor reset value ("5", "0x5", "0X0F") to an 8-bit literal like 0x05."""
    m = _HEX_RE.fullmatch(raw.strip())
    if m is None:
        raise ValueError(f"not a hexadecimal reset value: {raw!r}")
    n = int(m.group(1), 16)
    if n > 0xFF:
        raise ValueError(f"reset value {raw!r} does not fit in 8 bits")
    return f"0x{n:02x}"


def description_lines(text: Optional[str]) -> tuple[str, ...]:
    if not text:
        return ()
    text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    text = _TABLE_RE.sub("", text)
    return tuple(text.splitlines())


def field_layout(register: Register, bitfield: Bitfield) -> FieldLayout:
    getter, setter = accessor_names(bitfield)
    try:
        rng = bit_range(bitfield.start, bitfield.stop)
    except ValueError as e:
        raise ValueError(f"register {register.name}, bitfield {bitfield.name}: {e}") from None
    return FieldLayout(
        getter=getter,
        setter=setter,
        bit_range=rng,
        doc_lines=description_lines(bitfield.description),
        values=bitfield.values,
        reset=bitfield.reset,
    )


def register_layout(register: Register) -> RegisterLayout:
    try:
        literal = reset_literal(register.reset)
    except ValueError as e:
        raise ValueError(f"register {register.name}: {e}") from None
    return RegisterLayout(
        raw_name=register.name,
        type_name=struct_name(register.name),
        address=register.address,
        doc_lines=description_lines(register.description),
        reset_literal=literal,
        fields=tuple(field_layout(register, b) for b in register.bitfields),
    )


def derive_layouts(device: Device) -> tuple[RegisterLayout, ...]:
    seen: dict[str, str] = {}
    out: list[RegisterLayout] = []
    for reg in device.registers:
        layout = register_layout(reg)
        prev = seen.get(layout.type_name)
        if prev is not None:
            raise ValueError(
                f"registers {prev} and {reg.name} both derive type name {layout.type_name}"
            )
        seen[layout.type_name] = reg.name
        log.debug("%s -> %s (%d fields)", reg.name, layout.type_name, len(layout.fields))
        out.append(layout)
    return tuple(out)
