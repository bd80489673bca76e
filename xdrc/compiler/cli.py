from __future__ import annotations
import argparse, sys

from xdrc.compiler.pipeline import run
from xdrc.internals.version import print_banner


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="xdrc", description="XDR (RFC 4506) to Rust compiler")

    ap.add_argument("source", nargs='?', help="Path to the XDR spec (.x)")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Write the generated Rust module here (default: stdout)")
    ap.add_argument("--config", metavar="FILE",
                    help="TOML file with annotation and codegen settings")
    ap.add_argument("--no-prelude", action="store_true",
                    help="Omit the support prelude; import it from [codegen] prelude_path instead")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print AST")
    ap.add_argument("--dump-layout", action="store_true",
                    help="Print the encoded size range of every type")
    ap.add_argument("--verbose", action="store_true", help="Report pipeline stages on stderr")
    ap.add_argument("--version", action="store_true", help="Print version information and exit")

    args = ap.parse_args(argv)

    if args.version:
        print_banner()
        return 0

    if not args.source:
        print("error: source file required", file=sys.stderr)
        return 2

    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
