#!/usr/bin/env python3
"""Encrypt or decrypt a file with AES from the command line"""
import argparse
import logging
import os
import sys

from aesmodes.common import Mode, CipherError
from aesmodes.session import CipherSession

KEY_ENV = 'AESMODES_KEY'

logger = logging.getLogger(__name__)


def binary_file_data(file_name):
    """argparse.FileType won't work with binary stdin"""
    if file_name == '-':
        return sys.stdin.buffer.read()
    else:
        with open(file_name, 'rb') as f:
            return f.read()


def hex_bytes(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'not a hex string: {value!r}')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='aesmodes')
    parser.add_argument(
        '--loglevel',
        choices='DEBUG INFO WARNING ERROR'.split(),
        type=str.upper,
        help='Set the logging level',
    )
    parser.add_argument(
        'action',
        choices=('encrypt', 'decrypt'),
    )
    parser.add_argument(
        'file',
        help='The file to read. Default: standard input. No padding is applied.',
        nargs='?',
        default='-',
    )
    parser.add_argument(
        '-m', '--mode',
        help='The mode of operation',
        type=str.upper,
        choices=[m.value for m in Mode],
        default=Mode.CBC.value,
    )
    parser.add_argument(
        '-k', '--key',
        help=f'The key as hex. Default: the {KEY_ENV} environment variable.',
        type=hex_bytes,
    )
    parser.add_argument(
        '--iv',
        help='The IV or initial counter as hex (not used for ECB)',
        type=hex_bytes,
    )
    parser.add_argument(
        '-x', '--hex-output',
        action='store_true',
        help='Write hex instead of raw bytes',
    )
    return parser.parse_args(argv)


def main(args) -> int:
    key = args.key
    if key is None:
        env_key = os.environ.get(KEY_ENV)
        if env_key is None:
            print(f'No key given (use --key or {KEY_ENV})', file=sys.stderr)
            return 2
        try:
            key = bytes.fromhex(env_key)
        except ValueError:
            print(f'{KEY_ENV} is not a hex string', file=sys.stderr)
            return 2

    try:
        data = binary_file_data(args.file)
    except FileNotFoundError:
        print('No such file:', args.file, file=sys.stderr)
        return 2

    try:
        session = CipherSession(key, args.mode, args.iv)
        result = getattr(session, args.action)(data)
    except CipherError as e:
        print(f'{args.action} failed: {e}', file=sys.stderr)
        return 2
    logger.info(f'{args.action}ed {len(data)} bytes with {session!r}')

    if args.hex_output:
        sys.stdout.write(result.hex() + '\n')
    else:
        sys.stdout.buffer.write(result)
    return 0


def run(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(  # noqa
        level=args.loglevel,
        stream=sys.stderr,
        format='{asctime} - {levelname}({name}): {message}',
        style='{',
    )
    return main(args)


if __name__ == '__main__':
    sys.exit(run())
