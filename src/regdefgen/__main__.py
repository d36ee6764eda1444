from __future__ import annotations

import argparse
from pathlib import Path

from regdefgen.app import run_app
from regdefgen.utils.logger import get_logger

log = get_logger("regdefgen")


def main() -> None:
    p = argparse.ArgumentParser(
        prog="regdefgen",
        description="Generate Rust bitfield! register types from a SmartRF register_definition.xml",
    )
    p.add_argument("input", type=Path, help="Register definition XML file path")
    p.add_argument("-o", "--output", type=Path, default=None, help="Output .rs file (default: stdout)")
    p.add_argument("--prelude", action="store_true", help="Prepend `use bitfield::bitfield;` and a generated-file note")

    # Logging
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--quiet", action="store_true", help="Reduce console output")

    args = p.parse_args()

    try:
        run_app(
            input_path=args.input,
            output_path=args.output,
            prelude=args.prelude,
            log_level=args.log_level,
            quiet=args.quiet,
        )
    except (OSError, ValueError) as e:
        log.error("%s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
