import heapq
import itertools
import logging
import math
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

FALLBACK_CODE = "0" # code for the lone symbol of a one-symbol alphabet


class HuffmanError(Exception):
    """Base class for errors raised by the Huffman codec."""


class MissingSymbolError(HuffmanError, KeyError):
    """encode was asked for a symbol that is not in the code table."""

    def __init__(self, symbol, position: int):
        self.symbol = symbol
        self.position = position
        super().__init__(f"symbol {symbol!r} at position {position} has no code")

    def __str__(self):
        return self.args[0]


class FormatError(HuffmanError, ValueError):
    """Bit stream cannot be decoded against the given tree."""


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("symbol", "frequency", "left", "right")

    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # character, or None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode({self.symbol!r}, {self.frequency})"
        return f"HuffmanNode(<internal>, {self.frequency})"


def by_frequency(node: HuffmanNode) -> int:
    return node.frequency


def frequency_table(text) -> Dict[str, int]: # text: any finite sequence of symbols
    ft: Dict[str, int] = {}
    for symbol in text:
        ft[symbol] = ft.get(symbol, 0) + 1
    return ft


def build_huffman_tree(
    frequency_table: Dict[str, int],
    key: Callable[[HuffmanNode], int] = by_frequency,
) -> Optional[HuffmanNode]:
    """
    Greedy Huffman construction over a min-heap ordered by key(node).
    Equal keys leave the heap in insertion order, so a given table always
    gives the same tree. Returns None for an empty table.
    """
    order = itertools.count() # tie-break: first pushed, first popped
    priority_queue = [(key(leaf), next(order), leaf)
                      for leaf in (HuffmanNode(s, f) for s, f in frequency_table.items())]
    heapq.heapify(priority_queue)

    if not priority_queue:
        logger.debug("empty frequency table, no tree built")
        return None
    if len(priority_queue) == 1:
        logger.debug("single-symbol alphabet %r, leaf is the root", priority_queue[0][2].symbol)
        return priority_queue[0][2]

    merges = 0
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right) # internal node with combined frequency
        heapq.heappush(priority_queue, (key(merged_node), next(order), merged_node))
        merges += 1

    root = priority_queue[0][2]
    logger.debug("built tree: %d leaves, %d merges, root frequency %d",
                 len(frequency_table), merges, root.frequency)
    return root


def generate_huffman_codes(root: Optional[HuffmanNode]) -> Dict[str, str]:
    codes: Dict[str, str] = {}
    if root is None:
        return codes
    if root.is_leaf():
        codes[root.symbol] = FALLBACK_CODE
        return codes

    stack = [(root, "")]
    while stack:
        node, current_code = stack.pop()
        if node.is_leaf():
            codes[node.symbol] = current_code
            continue
        # right pushed first so the left subtree is visited first
        stack.append((node.right, current_code + "1"))
        stack.append((node.left, current_code + "0"))
    return codes


def build_codec(text) -> Tuple[Optional[HuffmanNode], Dict[str, str]]:
    root = build_huffman_tree(frequency_table(text))
    return root, generate_huffman_codes(root)


def huffman_encode(text, code_map: Dict[str, str]) -> str:
    parts = []
    for position, symbol in enumerate(text):
        try:
            parts.append(code_map[symbol])
        except KeyError:
            raise MissingSymbolError(symbol, position) from None
    return "".join(parts)


def huffman_decode(bitstring: str, root: Optional[HuffmanNode]) -> str:
    """
    Walk the tree one bit at a time, '0' to the left child and '1' to the
    right, emitting a symbol and restarting at the root on every leaf.

    The stream has to end on a symbol boundary; a trailing partial code is a
    FormatError, as is any character other than '0' and '1'. A tree that is a
    single leaf decodes every '0' as its symbol.
    """
    if not bitstring:
        return ""
    if root is None:
        raise FormatError("cannot decode a non-empty bit stream without a tree")

    decoded = []
    if root.is_leaf():
        for index, bit in enumerate(bitstring):
            if bit != FALLBACK_CODE:
                raise FormatError(f"unexpected {bit!r} at bit {index} for a single-symbol tree")
            decoded.append(root.symbol)
        return "".join(decoded)

    current_node = root
    for index, bit in enumerate(bitstring):
        if bit == "0":
            current_node = current_node.left
        elif bit == "1":
            current_node = current_node.right
        else:
            raise FormatError(f"invalid character {bit!r} at bit {index}")

        if current_node.is_leaf(): # reached a leaf
            decoded.append(current_node.symbol)
            current_node = root

    if current_node is not root:
        raise FormatError(f"bit stream of length {len(bitstring)} ends inside a code")
    return "".join(decoded)


# Analysis helpers

def weighted_code_length(frequency_table: Dict[str, int], code_map: Dict[str, str]) -> int:
    return sum(freq * len(code_map[symbol]) for symbol, freq in frequency_table.items())


def count_leaves(root: Optional[HuffmanNode]) -> int:
    if root is None:
        return 0
    leaves = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf():
            leaves += 1
        else:
            stack.append(node.left)
            stack.append(node.right)
    return leaves


def is_prefix_free(code_map: Dict[str, str]) -> bool:
    # after sorting, a prefix always sorts directly before some code it prefixes
    codes = sorted(code_map.values())
    return all(not b.startswith(a) for a, b in zip(codes, codes[1:]))


def shannon_entropy(frequency_table: Dict[str, int]) -> float:
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    return -sum((f / total) * math.log2(f / total) for f in frequency_table.values())
