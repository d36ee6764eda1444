from __future__ import annotations

import io
from typing import TextIO

from regdefgen.codegen.naming import FieldLayout, RegisterLayout, derive_layouts
from regdefgen.regdef.model import Device

INDENT = "    "

PRELUDE = (
    "use bitfield::bitfield;\n"
    "\n"
    "// The bitfields below are generated by regdefgen\n"
    "\n"
)


def _doc(out: TextIO, text: str = "") -> None:
    if text:
        out.write(f"{INDENT}/// {text}\n")
    else:
        out.write(f"{INDENT}///\n")


def _emit_field(field: FieldLayout, out: TextIO) -> None:
    out.write("\n")
    for line in field.doc_lines:
        # description lines go out verbatim, blank ones keep their trailing space
        out.write(f"{INDENT}/// {line}\n")

    if field.values:
        _doc(out)
        _doc(out, "# Values")
        _doc(out)
        for v in field.values:
            _doc(out, f"- {v.number}b: {v.brief}")
        _doc(out)
        _doc(out, f"The default value is {field.reset}")

    out.write(f"{INDENT}pub {field.getter}, {field.setter}: {field.bit_range};\n")


def emit_register(layout: RegisterLayout, out: TextIO) -> None:
    out.write("bitfield! {\n")
    for line in layout.doc_lines:
        out.write(f"{INDENT}/// {line}\n")
    _doc(out)
    _doc(out, "# Address")
    _doc(out)
    _doc(out, f"The address of this register is {layout.address}")
    out.write(f"{INDENT}#[derive(Clone, Copy)]\n")
    out.write(f"{INDENT}pub struct {layout.type_name}(u8);\n")

    for field in layout.fields:
        _emit_field(field, out)

    out.write("}\n")
    out.write("\n")
    out.write(f"impl Default for {layout.type_name} {{\n")
    out.write(f"{INDENT}fn default() -> Self {{\n")
    out.write(f"{INDENT}{INDENT}Self({layout.reset_literal})\n")
    out.write(f"{INDENT}}}\n")
    out.write("}\n")
    out.write("\n")


def render_register(layout: RegisterLayout) -> str:
    buf = io.StringIO()
    emit_register(layout, buf)
    return buf.getvalue()


def generate(device: Device, prelude: bool = False) -> str:
    """
    Render every register of `device`.

    All layouts are derived before any text is produced, so a bad register
    anywhere in the document fails the whole run with nothing emitted.
    """
    layouts = derive_layouts(device)

    buf = io.StringIO()
    if prelude:
        buf.write(PRELUDE)
    for layout in layouts:
        emit_register(layout, buf)
    return buf.getvalue()
