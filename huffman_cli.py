# huffman_cli.py
"""
Interactive demo: read one line, print its Huffman codes, the encoded bit
string and the text decoded back from it.

How to run:
  echo "abracadabra" | python huffman_cli.py
"""

import logging
import sys

import huffman as huff
from logging_utils import setup_logging

logger = logging.getLogger("huffman_cli")


def read_line(stream=None) -> str:
    stream = stream or sys.stdin
    line = stream.readline()
    return line.rstrip("\r\n")


def run(text: str, out=None) -> None:
    out = out or sys.stdout
    root, code_map = huff.build_codec(text)

    print("Huffman codes:", file=out)
    for symbol, code in code_map.items():
        print(f"{symbol}: {code}", file=out)

    encoded = huff.huffman_encode(text, code_map)
    print(f"Encoded: {encoded}", file=out)

    decoded = huff.huffman_decode(encoded, root)
    print(f"Decoded: {decoded}", file=out)

    logger.info("%d symbols, %d distinct, %d bits", len(text), len(code_map), len(encoded))


def main() -> int:
    setup_logging("huffman_cli")
    print("Enter text: ", end="", file=sys.stderr, flush=True)
    text = read_line()
    try:
        run(text)
    except huff.HuffmanError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
