#!/usr/bin/env python3
"""
Inject contract checks into a Python file.

Usage:
    hoare myfile.py                  # print rewritten source
    hoare myfile.py -o out.py        # write rewritten source
    hoare myfile.py --list           # list annotated declarations
    hoare myfile.py --release        # skip debug_* contracts
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .core.config import load_settings
from .core.models import RewriteResult
from .core.transformer import rewrite_file
from .logging import configure_logging, get_logger
from .logging_tags import CLI
from .parser import ContractParser

logger = get_logger(__name__)


class RewriteSummary:
    """Summary of a file rewrite"""

    def __init__(self, filename: str, result: RewriteResult):
        self.filename = filename
        self.result = result

    @property
    def failed(self) -> int:
        return len(self.result.diagnostics)

    def print_summary(self, stream=sys.stderr):
        """Print formatted summary"""
        print("=" * 80, file=stream)
        print(f"CONTRACT REWRITE: {self.filename}", file=stream)
        print("=" * 80, file=stream)

        if not self.result.rewritten and not self.result.diagnostics:
            print("⚠️  No contract decorators found", file=stream)
            return

        print(f"✅ Rewritten: {len(self.result.rewritten)}", file=stream)
        for name in self.result.rewritten:
            print(f"   {name}", file=stream)

        if self.result.diagnostics:
            print(f"❌ Errors: {self.failed}", file=stream)
            for diagnostic in self.result.diagnostics:
                print(f"   {diagnostic}", file=stream)


def print_contracts(file_path: str) -> int:
    declarations = ContractParser().parse_file(file_path)
    if not declarations:
        print("⚠️  No contract decorators found")
        return 0

    for decl in declarations:
        print(f"{decl['qualname']}:{decl['lineno']} ({decl['shape']})")
        for contract in decl["contracts"]:
            predicate = contract["predicate"]
            shown = repr(predicate) if predicate is not None else "<malformed>"
            print(f"   @{contract['keyword']} {shown}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Inject precondition/postcondition/invariant checks into a Python file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Show the rewritten module
    hoare examples/contracts.py

    # Write it next to the original
    hoare examples/contracts.py -o build/contracts.py

    # Drop debug_* contracts, as for an optimised build
    hoare examples/contracts.py --release
        """
    )

    parser.add_argument("file", help="Python file to rewrite")
    parser.add_argument("-o", "--output", help="Write the rewritten source here instead of stdout")
    parser.add_argument("--list", action="store_true", help="Only list annotated declarations")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--release", action="store_true", help="Disable debug_* contracts")
    mode.add_argument("--debug", action="store_true", help="Enable debug_* contracts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if not Path(args.file).exists():
        print(f"❌ Error: File not found: {args.file}", file=sys.stderr)
        return 1

    if args.list:
        return print_contracts(args.file)

    debug_assertions = settings.debug_assertions
    if args.release:
        debug_assertions = False
    elif args.debug:
        debug_assertions = True

    try:
        result = rewrite_file(args.file, debug_assertions=debug_assertions)
    except SyntaxError as e:
        print(f"❌ Error: {args.file} is not valid Python: {e}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(result.source, encoding="utf-8")
        logger.info(f"{CLI} wrote {args.output}")
    else:
        sys.stdout.write(result.source)

    summary = RewriteSummary(args.file, result)
    if args.verbose or summary.failed:
        summary.print_summary()

    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
