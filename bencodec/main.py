import argparse
import logging
import sys
from typing import Iterator, List, Optional

from . import bencoding, sources
from .values import ByteString, Kind, Value

MAX_TEXT = 64
MAX_HEX = 20


def _describe(s: ByteString) -> str:
    try:
        text = s.text()
    except UnicodeDecodeError:
        text = None

    if text is not None and text.isprintable():
        if len(text) > MAX_TEXT:
            text = text[:MAX_TEXT] + "..."
        return f'"{text}"'

    shown = s.data[:MAX_HEX].hex()
    if len(s) > MAX_HEX:
        shown += "..."
    return f"<{len(s)} bytes {shown}>"


def tree_lines(value: Value, label: str = "", depth: int = 0) -> Iterator[str]:
    pad = "  " * depth
    if value.kind is Kind.MAP:
        yield f"{pad}{label}map ({len(value)} entries)"
        for key, item in value.sorted_items():
            yield from tree_lines(item, f"{_describe(ByteString(key))}: ", depth + 1)
    elif value.kind is Kind.LIST:
        yield f"{pad}{label}list ({len(value)} items)"
        for item in value:
            yield from tree_lines(item, "- ", depth + 1)
    elif value.kind is Kind.INTEGER:
        yield f"{pad}{label}{bencoding.format_decimal(value.value).decode('ascii')}"
    else:
        yield f"{pad}{label}{_describe(value)}"


def main(argv: Optional[List[str]] = None) -> int:

    parser = argparse.ArgumentParser(
        prog="bencodec", description="inspect and canonicalize bencoded data"
    )
    parser.add_argument("-v", "--verbose", help="debug log", action="store_true")
    parser.add_argument("-l", "--log-file", help="log file")
    parser.add_argument(
        "--lenient", help="accept integers like i03e and i-0e", action="store_true"
    )
    parser.add_argument(
        "--check", help="fail if the input is not canonical", action="store_true"
    )
    parser.add_argument("-o", "--output", help="write the canonical encoding here")
    parser.add_argument("source", help="bencoded file, http(s) URL or - for stdin")

    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            filemode="a",
            level=level,
            format="%(levelname)s:%(filename)s:%(lineno)s:%(message)s",
        )
    else:
        logging.basicConfig(
            level=level, format="%(levelname)s:%(filename)s:%(lineno)s:%(message)s"
        )

    try:
        raw = sources.read_source(args.source)
        value = bencoding.loads(raw, strict=not args.lenient)
    except (sources.SourceError, bencoding.DecodingError) as e:
        logging.debug(f"failed to load {args.source}", exc_info=True)
        print(f"bencodec: {e}", file=sys.stderr)
        return 2

    logging.debug(f"decoded {args.source}: {value.kind.value}")

    if args.output:
        sources.save(value, args.output)
        logging.info(f"canonical encoding written to {args.output}")

    if args.check:
        canonical = bencoding.dumps(value)
        if canonical != raw:
            print(
                f"bencodec: {args.source} is not canonical "
                f"({len(raw)} bytes in, {len(canonical)} bytes canonical)",
                file=sys.stderr,
            )
            return 1
        print(f"{args.source}: canonical")

    if not args.check and not args.output:
        for line in tree_lines(value):
            print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
