import heapq
from dataclasses import dataclass, field
from itertools import count
from typing import Dict, List, Optional, Tuple


class HuffmanError(ValueError):
    """Base class for codec failures. A failed run produces no partial result."""


class InvalidInputError(HuffmanError):
    pass


class UnknownSymbolError(HuffmanError):
    pass


class MalformedBitstringError(HuffmanError):
    pass


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # character, or None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.frequency})"
        return f"HuffmanNode(None, {self.frequency}, {self.left!r}, {self.right!r})"


def build_frequency_table(text: str) -> Dict[str, int]: # text: input line, may be empty
    frequency_table: Dict[str, int] = {}
    for ch in text:
        frequency_table[ch] = frequency_table.get(ch, 0) + 1
    return frequency_table


def build_huffman_tree(frequency_table: Dict[str, int]) -> HuffmanNode: # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise InvalidInputError("cannot build a Huffman tree from an empty frequency table")

    # Entries are (frequency, sequence, node). Leaves are numbered in symbol order and
    # merged nodes in creation order, so equal frequencies always resolve the same way.
    sequence = count()
    priority_queue = [
        (frequency_table[symbol], next(sequence), HuffmanNode(symbol, frequency_table[symbol]))
        for symbol in sorted(frequency_table)
    ]
    heapq.heapify(priority_queue)

    while len(priority_queue) > 1:
        left_freq, _, left = heapq.heappop(priority_queue)
        right_freq, _, right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left_freq + right_freq, left, right) # internal node with combined frequency
        heapq.heappush(priority_queue, (merged_node.frequency, next(sequence), merged_node))

    # A lone symbol stays a bare leaf; generate_huffman_codes and huffman_decode
    # treat that root as having the one-bit code "0".
    return priority_queue[0][2]


def generate_huffman_codes(root: HuffmanNode) -> Dict[str, str]: # root: root of the Huffman tree
    if root.is_leaf:
        return {root.symbol: "0"}

    codes: Dict[str, str] = {}
    def generate_codes_helper(node, current_code):
        if node.is_leaf:
            codes[node.symbol] = current_code
            return
        generate_codes_helper(node.left, current_code + "0")
        generate_codes_helper(node.right, current_code + "1")

    generate_codes_helper(root, "")
    return codes


def huffman_encode(text: str, code_map: Dict[str, str]) -> str:
    try:
        return "".join(code_map[ch] for ch in text)
    except KeyError as exc:
        raise UnknownSymbolError(f"no code for symbol {exc.args[0]!r}") from None


def huffman_decode(bitstring: str, root: HuffmanNode) -> str: # bitstring: '0'/'1' characters produced with this tree
    decoded: List[str] = []

    if root.is_leaf:
        for position, bit in enumerate(bitstring):
            if bit != "0":
                raise MalformedBitstringError(
                    f"unexpected {bit!r} at bit {position} for a single-symbol tree")
            decoded.append(root.symbol)
        return "".join(decoded)

    current_node = root
    for position, bit in enumerate(bitstring):
        if bit == "0":
            current_node = current_node.left
        elif bit == "1":
            current_node = current_node.right
        else:
            raise MalformedBitstringError(f"invalid character {bit!r} at bit {position}")

        if current_node is None:
            raise MalformedBitstringError(f"bit {position} leads to a missing child")
        if current_node.is_leaf:
            decoded.append(current_node.symbol)
            current_node = root

    if current_node is not root:
        raise MalformedBitstringError("bitstring ends in the middle of a code")
    return "".join(decoded)


@dataclass
class CompressionResult:
    """Everything one run of the codec produces for a single line of text.

    ``original_bits`` assumes 8 bits per character; ``compressed_bits`` is the
    length of ``encoded`` since each character there stands for one bit.
    """
    text: str
    frequencies: Dict[str, int] = field(default_factory=dict)
    codes: Dict[str, str] = field(default_factory=dict)
    root: Optional[HuffmanNode] = None
    encoded: str = ""
    decoded: str = ""

    @property
    def matches(self) -> bool:
        return self.decoded == self.text

    @property
    def original_bits(self) -> int:
        return len(self.text) * 8

    @property
    def compressed_bits(self) -> int:
        return len(self.encoded)


def compress_text(text: str) -> CompressionResult:
    """Run frequency -> tree -> codes -> encode -> decode for one input.

    Each call builds its own table, tree and code map; nothing is shared
    between calls. Empty input yields an empty result rather than an error.
    """
    result = CompressionResult(text=text, frequencies=build_frequency_table(text))
    if not result.frequencies:
        return result

    result.root = build_huffman_tree(result.frequencies)
    result.codes = generate_huffman_codes(result.root)
    result.encoded = huffman_encode(text, result.codes)
    result.decoded = huffman_decode(result.encoded, result.root)
    return result


def is_prefix_free(code_map: Dict[str, str]) -> bool:
    # After sorting, a code that prefixes another sorts directly before some code it prefixes
    codes = sorted(code_map.values())
    return all(not b.startswith(a) for a, b in zip(codes, codes[1:]))


def weighted_length_violations(frequency_table: Dict[str, int], code_map: Dict[str, str]) -> List[Tuple[str, str]]:
    """Pairs (a, b) where a is strictly more frequent than b yet has a strictly longer code."""
    violations = []
    for a in frequency_table:
        for b in frequency_table:
            if frequency_table[a] > frequency_table[b] and len(code_map[a]) > len(code_map[b]):
                violations.append((a, b))
    return violations
