"""Inspect field array snapshots from the command line.

    python -m bitfieldarray info users.bfa
    python -m bitfieldarray get users.bfa 17 42
    python -m bitfieldarray dump users.bfa --start 0 --stop 1000
"""

import argparse
import logging
import sys

from .errors import SnapshotError
from .logger import LOGGER_NAME
from .snapshot import read_snapshot_from_path


def _cmd_info(array, args):
    print(f"field_width\t{array.field_width}")
    print(f"domain_size\t{array.domain_size}")
    print(f"length\t{array.length()}")
    print(f"cardinality\t{array.cardinality()}")
    print(f"size\t{array.size()}")


def _cmd_get(array, args):
    for index in args.indices:
        print(f"{index}\t{array.get(index)}")


def _cmd_dump(array, args):
    stop = array.length() if args.stop is None else args.stop
    i = array.next_set_bit(args.start)
    while 0 <= i < stop:
        print(f"{i}\t{array.get(i)}")
        i = array.next_set_bit(i + 1)


def build_parser():
    parser = argparse.ArgumentParser(prog="bitfieldarray", description="Inspect field array snapshots.")
    parser.add_argument("--log-level", default=None,
                        help="Logging level for the bitfieldarray logger (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_info = sub.add_parser("info", help="Print field width, length and size of a snapshot")
    p_info.add_argument("snapshot")
    p_info.set_defaults(func=_cmd_info)

    p_get = sub.add_parser("get", help="Print the value stored at each index")
    p_get.add_argument("snapshot")
    p_get.add_argument("indices", nargs="+", type=int)
    p_get.set_defaults(func=_cmd_get)

    p_dump = sub.add_parser("dump", help="Print every nonzero slot in [start, stop)")
    p_dump.add_argument("snapshot")
    p_dump.add_argument("--start", type=int, default=0)
    p_dump.add_argument("--stop", type=int, default=None)
    p_dump.set_defaults(func=_cmd_dump)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        logging.getLogger(LOGGER_NAME).setLevel(args.log_level.upper())
    try:
        array = read_snapshot_from_path(args.snapshot)
        if array is None:
            raise SnapshotError(f"{args.snapshot} holds no snapshot")
        args.func(array, args)
    except (SnapshotError, IndexError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
