from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from lxml import etree

from regdefgen.regdef.model import Bitfield, Device, Register, Value
from regdefgen.utils.logger import get_logger

log = get_logger(__name__)

ROOT_TAG = "registerdefinition"

_DIGITS_RE = re.compile(r"[0-9]+")


def _parser() -> etree.XMLParser:
    # the vendor file points at a DTD that must never be fetched or applied
    return etree.XMLParser(
        load_dtd=False,
        dtd_validation=False,
        no_network=True,
        resolve_entities=False,
    )


def _t(node: Optional[etree._Element], tag: str, where: str) -> Optional[str]:
    """Text of child `tag`: None when absent, "" when present but empty."""
    if node is None:
        return None
    e = node.find(tag)
    if e is None:
        return None
    # child markup, comments and unexpanded entities would truncate e.text
    if len(e):
        raise ValueError(f"{where}: <{tag}> must contain plain text only")
    return (e.text or "").strip()


def _req(node: etree._Element, tag: str, where: str) -> str:
    s = _t(node, tag, where)
    if s is None:
        raise ValueError(f"{where}: missing <{tag}>")
    return s


def _int(s: str, where: str) -> int:
    if not _DIGITS_RE.fullmatch(s):
        raise ValueError(f"{where}: not a bit index: {s!r}")
    return int(s, 10)


def _description(node: etree._Element) -> Optional[str]:
    e = node.find("Description")
    if e is None:
        return None
    # keep inline markup as text so the table stripper can see it
    parts = [e.text or ""]
    parts.extend(etree.tostring(c, encoding="unicode") for c in e)
    text = "".join(parts)
    return text or None


def _parse_value(v: etree._Element, where: str) -> Value:
    return Value(number=_req(v, "Number", where), brief=_req(v, "Brief", where))


def _parse_bitfield(b: etree._Element, reg_name: str) -> Bitfield:
    name = _t(b, "Name", f"register {reg_name}")
    if not name:
        raise ValueError(f"register {reg_name}: bitfield with missing or empty <Name>")
    where = f"register {reg_name}, bitfield {name}"

    values = tuple(_parse_value(v, where) for v in b.findall("Value"))
    return Bitfield(
        name=name,
        start=_int(_req(b, "Start", where), where),
        stop=_int(_req(b, "Stop", where), where),
        access=_req(b, "Access", where),
        reset=_req(b, "Reset", where),
        description=_description(b),
        values=values,
    )


def _parse_register(r: etree._Element, index: int) -> Register:
    name = _t(r, "Name", f"register #{index}")
    if not name:
        raise ValueError(f"register #{index}: missing or empty <Name>")
    where = f"register {name}"

    bitfields = tuple(_parse_bitfield(b, name) for b in r.findall("Bitfield"))
    return Register(
        name=name,
        address=_req(r, "Address", where),
        reset=_req(r, "RegReset", where),
        description=_description(r),
        bitfields=bitfields,
    )


def load_register_definition(path: Path) -> Device:
    path = Path(path)
    with path.open("rb") as fh:
        try:
            tree = etree.parse(fh, _parser())
        except etree.XMLSyntaxError as e:
            raise ValueError(f"malformed register definition {path}: {e}") from e
    root = tree.getroot()

    if root.tag != ROOT_TAG:
        raise ValueError(f"{path}: expected <{ROOT_TAG}> root, got <{root.tag}>")

    dev_name = _t(root, "DeviceName", str(path)) or path.stem
    registers = tuple(_parse_register(r, i) for i, r in enumerate(root.findall("Register")))

    if not registers:
        log.warning("No <Register> found in register definition: %s", path)

    log.info("Loaded register definition device=%s registers=%d", dev_name, len(registers))
    return Device(name=dev_name, registers=registers)
