# filename: huffman_core.py

import heapq
import logging
from collections import Counter, namedtuple

logger = logging.getLogger(__name__)

SYMBOL_COUNT = 256

# count carried by the sentinel leaf that closes the sorted leaf list
LAST_NODE = 0xFFFFFFFF

MAX_LEAF_NODES = SYMBOL_COUNT + 1
MAX_INTERNAL_NODES = SYMBOL_COUNT - 1

Code = namedtuple("Code", ["length", "value"])

EMPTY_CODE = Code(0, 0)


class HuffmanNode:
    def __init__(self, character, count, is_internal=False):
        self.character = character
        self.count = count
        self.is_internal = is_internal
        # arena indices, not references
        self.parent = None
        self.left = None
        self.right = None


class HuffmanTree:
    """
    Index-based node arena.

    Sorted leaves are stored first, followed by the sentinel leaf, followed
    by internal nodes in creation order. Children and parents are indices
    into `nodes`.
    """

    def __init__(self):
        self.nodes = []
        self.leaf_count = 0
        self.internal_count = 0
        self.sentinel = None
        self.root = None

    def add_leaf(self, character, count):
        assert self.internal_count == 0, "leaves must precede internal nodes"
        assert self.leaf_count < MAX_LEAF_NODES, "leaf arena overflow"
        self.nodes.append(HuffmanNode(character, count))
        self.leaf_count += 1
        return len(self.nodes) - 1

    def add_sentinel(self):
        self.sentinel = self.add_leaf(0, LAST_NODE)
        return self.sentinel

    def merge(self, left, right):
        assert self.internal_count < MAX_INTERNAL_NODES, "internal node arena overflow"
        count = self.nodes[left].count + self.nodes[right].count
        node = HuffmanNode(None, count, is_internal=True)
        node.left = left
        node.right = right
        self.nodes.append(node)
        self.internal_count += 1
        index = len(self.nodes) - 1
        self.nodes[left].parent = index
        self.nodes[right].parent = index
        return index

    def __getitem__(self, index):
        return self.nodes[index]

    def leaves(self):
        """Indices of the real (non-sentinel) leaves."""
        return [i for i in range(self.leaf_count) if i != self.sentinel]

    def depth(self, index):
        depth = 0
        while self.nodes[index].parent is not None:
            index = self.nodes[index].parent
            depth += 1
        return depth


def radix_pass(frequencies, digit, in_order):
    """One stable counting pass of an LSD radix sort on decimal `digit`."""
    divisor = 10 ** digit

    symbol_count = [0] * 10
    for symbol in in_order:
        symbol_count[(frequencies[symbol] // divisor) % 10] += 1

    offsets = [0] * 10
    for i in range(1, 10):
        offsets[i] = offsets[i - 1] + symbol_count[i - 1]

    out_order = [0] * len(in_order)
    for symbol in in_order:
        d = (frequencies[symbol] // divisor) % 10
        out_order[offsets[d]] = symbol
        offsets[d] += 1
    return out_order


def radix_passes(max_freq):
    if max_freq <= 1:
        return 0
    return len(str(max_freq))


class HuffmanLogic:
    """Frequency counting, leaf sorting, tree building and code generation."""

    def __init__(self):
        self.frequencies = [0] * SYMBOL_COUNT
        self.max_freq = 0

    def count_frequencies(self, data):
        self.frequencies = [0] * SYMBOL_COUNT
        for symbol, freq in Counter(data).items():
            self.frequencies[symbol] = freq
        self.max_freq = max(self.frequencies)
        return self.frequencies, self.max_freq

    def sort_symbols(self, frequencies, max_freq):
        """Byte values with nonzero frequency, by ascending frequency."""
        order = list(range(SYMBOL_COUNT))
        for digit in range(radix_passes(max_freq)):
            order = radix_pass(frequencies, digit, order)
        return [symbol for symbol in order if frequencies[symbol] > 0]

    def build_tree(self, frequencies=None, max_freq=None):
        if frequencies is None:
            frequencies = self.frequencies
        if max_freq is None:
            max_freq = max(frequencies)

        tree = HuffmanTree()
        for symbol in self.sort_symbols(frequencies, max_freq):
            tree.add_leaf(symbol, frequencies[symbol])
        tree.add_sentinel()

        # priority queue of internal nodes, ties broken by creation order
        queue = []
        leaf_idx = 0

        def get_min_node():
            nonlocal leaf_idx
            if leaf_idx != tree.sentinel and (
                not queue or tree[leaf_idx].count <= queue[0][0]
            ):
                leaf_idx += 1
                return leaf_idx - 1
            return heapq.heappop(queue)[2]

        if tree.sentinel == 0:
            logger.debug("no symbols, empty tree")
            return tree

        while tree.root is None:
            left = get_min_node()
            if leaf_idx == tree.sentinel and not queue:
                tree.root = left
            else:
                right = get_min_node()
                merged = tree.merge(left, right)
                heapq.heappush(queue, (tree[merged].count, tree.internal_count, merged))

        logger.debug(
            "built tree: %d leaves, %d internal nodes",
            tree.leaf_count - 1,
            tree.internal_count,
        )
        return tree

    def generate_codes(self, tree, node=None, current_code=EMPTY_CODE, codes=None):
        if codes is None:
            codes = [EMPTY_CODE] * SYMBOL_COUNT
        if node is None:
            node = tree.root
            if node is None:
                return codes
        current = tree[node]
        if current.is_internal:
            length = current_code.length + 1
            value = current_code.value << 1
            self.generate_codes(tree, current.left, Code(length, value), codes)
            self.generate_codes(tree, current.right, Code(length, value | 1), codes)
        else:
            codes[current.character] = current_code
        return codes
