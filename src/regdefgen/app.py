from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from regdefgen.codegen.emitter import generate
from regdefgen.regdef.loader import load_register_definition
from regdefgen.utils.logger import get_logger, setup_logging

log = get_logger(__name__)


def run_app(
    input_path: Path,
    output_path: Optional[Path],
    prelude: bool,
    log_level: str,
    quiet: bool,
) -> None:
    setup_logging(level=log_level, quiet=quiet)

    log.info("regdefgen starting")
    log.info("Register definition: %s", input_path)

    device = load_register_definition(input_path)
    text = generate(device, prelude=prelude)

    # nothing is written until the whole file has been generated
    if output_path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        with open(output_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        log.info("Wrote %d registers to %s", len(device.registers), output_path)
