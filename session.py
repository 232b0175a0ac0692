"""
Interactive Huffman session

Reads a line, runs the codec on it and prints the frequency table, the code
table, the encoded/decoded strings, a verification line and the size figures.
Repeats while the user answers y/Y.

How to run:
  python session.py                         # interactive, reads stdin
  python session.py --text "hello world"    # one report per --text, no prompts
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional, TextIO

import huffman as huff


# Display helpers

def compression_ratio(original_bits: int, compressed_bits: int) -> Optional[float]:
    if compressed_bits == 0:
        return None
    return original_bits / compressed_bits

def display_symbol(symbol: str) -> str:
    # Display only; the codec itself never substitutes characters
    if symbol.isprintable() and not symbol.isspace():
        return symbol
    return repr(symbol)

def format_frequency_table(result: huff.CompressionResult) -> List[str]:
    lines = [
        "Character | Frequency",
        "-----------------------",
    ]
    for symbol in sorted(result.frequencies):
        lines.append(f"    {display_symbol(symbol)}       | {result.frequencies[symbol]}")
    return lines

def format_code_table(result: huff.CompressionResult) -> List[str]:
    lines = [
        "Character | Frequency | Code",
        "---------------------------------",
    ]
    for symbol in sorted(result.codes):
        lines.append(
            f"    {display_symbol(symbol)}       | {result.frequencies[symbol]}        | {result.codes[symbol]}")
    return lines


def report(result: huff.CompressionResult, out: TextIO) -> None:
    print("\nFrequency Table:", file=out)
    for line in format_frequency_table(result):
        print(line, file=out)

    print("\nHuffman Codes:", file=out)
    for line in format_code_table(result):
        print(line, file=out)

    print(f"\nOriginal String: {result.text}", file=out)
    print(f"Encoded String: {result.encoded}", file=out)
    print(f"Decoded String: {result.decoded}", file=out)

    if result.matches:
        print("\nVerification Successful: Decoded string matches the original string.", file=out)
    else:
        print("\nVerification Failed: Decoded string does not match the original string.", file=out)

    ratio = compression_ratio(result.original_bits, result.compressed_bits)
    print(f"\nOriginal Size: {result.original_bits} bits", file=out)
    print(f"Compressed Size: {result.compressed_bits} bits", file=out)
    print(f"Compression Ratio: {'n/a' if ratio is None else f'{ratio:.4f}'}", file=out)


# Session loop

def run_session(read_line: Callable[[str], str], out: TextIO) -> int:
    """Prompt for lines until the user declines or input runs out.

    read_line behaves like input(): it takes a prompt and raises EOFError at
    end of input. Returns the number of lines processed.
    """
    processed = 0
    while True:
        print("Enter a string: ", end="", file=out)
        try:
            text = read_line("")
        except EOFError:
            break

        try:
            result = huff.compress_text(text)
        except huff.HuffmanError as exc:
            print(f"\n[error] {exc}", file=out)
        else:
            report(result, out)
            processed += 1

        print("\nWould you like to test another string? (y/n): ", end="", file=out)
        try:
            answer = read_line("")
        except EOFError:
            break
        if answer.strip() not in ("y", "Y"):
            break

    print("\nThank you for using the Huffman Encoding Program!", file=out)
    return processed


# Main

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Huffman-encode lines of text and verify the round trip.")
    ap.add_argument("--text", action="append", default=None,
                    help="Line to encode without prompting (repeatable)")
    args = ap.parse_args(argv)

    if args.text is None:
        run_session(input, sys.stdout)
        return 0

    status = 0
    for text in args.text:
        try:
            result = huff.compress_text(text)
        except huff.HuffmanError as exc:
            print(f"[error] {text!r}: {exc}", file=sys.stderr)
            status = 1
            continue
        report(result, sys.stdout)
        if not result.matches:
            status = 1
    return status


if __name__ == "__main__":
    raise SystemExit(main())
