# filename: huffman_service.py

import logging
import struct

from huffman_bits import BitCursor, BitCursorRead
from huffman_core import SYMBOL_COUNT, HuffmanLogic
from huffman_errors import (
    AllocationFailure,
    InconsistentFrequencyTable,
    MalformedHeader,
)

logger = logging.getLogger(__name__)

# 256 unsigned 32-bit counts, little-endian, indexed by byte value
HEADER_FORMAT = "<%dI" % SYMBOL_COUNT
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


def packed_size(frequencies, codes):
    """Bytes needed for the header plus the padded bit stream."""
    bit_count = sum(freq * code.length for freq, code in zip(frequencies, codes))
    return (bit_count + 7) // 8 + HEADER_SIZE


def write_frequency_table(frequencies, buffer):
    struct.pack_into(HEADER_FORMAT, buffer, 0, *frequencies)


def read_frequency_table(data):
    """
    Parse the frequency table at the start of `data`.

    Returns (frequencies, total_length, unique_symbols, max_freq).
    """
    if len(data) < HEADER_SIZE:
        raise MalformedHeader(
            f"expected at least {HEADER_SIZE} header bytes, got {len(data)}"
        )
    frequencies = list(struct.unpack_from(HEADER_FORMAT, data, 0))
    total = sum(frequencies)
    unique = sum(1 for freq in frequencies if freq > 0)
    return frequencies, total, unique, max(frequencies)


def default_allocator(size):
    return bytearray(size)


class HuffmanService:
    def __init__(self, allocator=None):
        self.logic = HuffmanLogic()
        self.allocator = allocator or default_allocator

    def _allocate(self, size):
        try:
            buffer = self.allocator(size)
        except MemoryError as e:
            raise AllocationFailure(f"could not allocate {size} bytes") from e
        if buffer is None or len(buffer) != size:
            raise AllocationFailure(f"allocator did not return {size} bytes")
        return buffer

    def compress(self, data):
        frequencies, max_freq = self.logic.count_frequencies(data)
        tree = self.logic.build_tree(frequencies, max_freq)
        codes = self.logic.generate_codes(tree)

        size = packed_size(frequencies, codes)
        out = self._allocate(size)
        out[:] = bytes(size)
        write_frequency_table(frequencies, out)

        cursor = BitCursor(out, HEADER_SIZE)
        for symbol in data:
            code = codes[symbol]
            cursor.write(code.length, code.value)

        logger.debug("compressed %d bytes into %d bytes", len(data), size)
        return bytes(out)

    def decompress(self, data):
        frequencies, total, unique, max_freq = read_frequency_table(data)
        self.logic.frequencies = frequencies
        self.logic.max_freq = max_freq
        payload_len = len(data) - HEADER_SIZE
        if total == 0:
            if payload_len > 0:
                raise InconsistentFrequencyTable(
                    f"frequency table is empty but {payload_len} packed bytes remain"
                )
            return b""

        tree = self.logic.build_tree(frequencies, max_freq)
        out = self._allocate(total)
        root = tree[tree.root]

        if not root.is_internal:
            # a single distinct symbol has a zero-bit code, nothing to read
            out[:] = bytes([root.character]) * total
            logger.debug("decompressed %d copies of a single symbol", total)
            return bytes(out)

        remaining = list(frequencies)
        cursor = BitCursorRead(data, HEADER_SIZE)
        position = 0
        node = root
        while unique > 0:
            try:
                bit = cursor.read(1)
            except EOFError as e:
                raise InconsistentFrequencyTable(
                    f"bit stream ended after {position} of {total} symbols"
                ) from e
            node = tree[node.right if bit else node.left]
            if node.is_internal:
                continue

            character = node.character
            if remaining[character] == 0:
                raise InconsistentFrequencyTable(
                    f"symbol {character} occurs more often than the header records"
                )
            out[position] = character
            position += 1
            remaining[character] -= 1
            if remaining[character] == 0:
                unique -= 1
            node = root

        logger.debug("decompressed %d bytes into %d bytes", len(data), total)
        return bytes(out)


def encode(data):
    return HuffmanService().compress(data)


def decode(data):
    return HuffmanService().decompress(data)
