"""CLI entry point: python -m nbt_codec {dump,info} <file>"""

import argparse
import logging
import sys
from typing import List, Optional

from . import NBTError, __version__, decode_document, sniff, to_json


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='nbt_codec', description='Inspect NBT files.')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='log more (repeat for debug output)')
    parser.add_argument('--version', action='version', version=f'nbt_codec {__version__}')
    sub = parser.add_subparsers(dest='command')

    dump_p = sub.add_parser('dump', help='print the file as JSON')
    dump_p.add_argument('file')
    dump_p.add_argument('--indent', type=int, default=2, metavar='N')

    info_p = sub.add_parser('info', help='print envelope and root tag type')
    info_p.add_argument('file')
    return parser


def _read(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=[logging.WARNING, logging.INFO, logging.DEBUG][min(2, args.verbose)])

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        data = _read(args.file)
        root = decode_document(data)
        if args.command == 'dump':
            print(to_json(root, indent=args.indent))
        else:
            print(f'envelope: {sniff(data).name.lower()}')
            print(f'root: {root.type.name} {root.key!r}')
    except NBTError as e:
        print(f'nbt_codec: error: {e}', file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f'nbt_codec: {e}', file=sys.stderr)
        sys.exit(2)


if __name__ == '__main__':
    main()
