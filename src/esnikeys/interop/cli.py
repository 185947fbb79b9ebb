from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, TextIO

from ..config import INPUT_ENCODINGS, LOG_LEVELS, Settings
from ..crypto.checksum import CHECKSUM_LENGTH, CHECKSUM_OFFSET, compute_checksum
from ..exceptions import ESNIError
from ..protocol.keys import ESNIKeys
from .harness import hexdump, record_bytes

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="esnikeys", description="Inspect ESNIKeys records.")
    p.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=settings.log_level)
    p.add_argument(
        "--encoding",
        choices=INPUT_ENCODINGS,
        default=settings.input_encoding,
        help="text encoding of the records (TXT records use base64)",
    )
    p.add_argument("--hex", dest="encoding", action="store_const", const="hex")
    sub = p.add_subparsers(dest="cmd", required=True)

    dec = sub.add_parser("decode", help="decode and print records")
    dec.add_argument("records", nargs="*")
    dec.add_argument("--file", type=argparse.FileType("r"), help="one record per line")
    dump = dec.add_mutually_exclusive_group()
    dump.add_argument("--dump", dest="hexdump", action="store_true", default=settings.hexdump)
    dump.add_argument("--no-dump", dest="hexdump", action="store_false")

    chk = sub.add_parser("checksum", help="compare transmitted and computed checksums")
    chk.add_argument("record")
    return p


def _records(args: argparse.Namespace) -> list[str]:
    records = list(args.records)
    if args.file is not None:
        with args.file:
            records += [line.strip() for line in args.file if line.strip()]
    return records


def decode_records(
    records: Iterable[str], encoding: str, show_dump: bool, out: TextIO
) -> int:
    failed = 0
    for i, text in enumerate(records):
        print(f"----------- ESNI Record {i}", file=out)
        try:
            data = record_bytes(text, encoding)
        except ESNIError as e:
            print(f"ERROR: Decode record data: {e}", file=out)
            failed += 1
            continue
        if show_dump:
            print(hexdump(data), file=out)
            print(file=out)
        try:
            keys = ESNIKeys.deserialize(data)
        except ESNIError as e:
            logger.debug("record %d rejected", i, exc_info=True)
            print(f"ERROR: Unmarshal record data: {e}", file=out)
            failed += 1
            continue
        print(keys.describe(), file=out)
        print("-----------", file=out)
    return 1 if failed else 0


def show_checksum(text: str, encoding: str, out: TextIO) -> int:
    data = record_bytes(text, encoding)
    if len(data) < CHECKSUM_OFFSET + CHECKSUM_LENGTH:
        print("ERROR: record too short for a checksum", file=out)
        return 1
    received = data[CHECKSUM_OFFSET : CHECKSUM_OFFSET + CHECKSUM_LENGTH]
    computed = compute_checksum(data)
    print(f"transmitted: {received.hex()}", file=out)
    print(f"computed:    {computed.hex()}", file=out)
    return 0 if received == computed else 1


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    p = build_parser(settings)
    args = p.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    if args.cmd == "decode":
        records = _records(args)
        if not records:
            p.error("no records given")
        return decode_records(records, args.encoding, args.hexdump, sys.stdout)
    if args.cmd == "checksum":
        try:
            return show_checksum(args.record, args.encoding, sys.stdout)
        except ESNIError as e:
            print(f"ERROR: {e}", file=sys.stdout)
            return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
