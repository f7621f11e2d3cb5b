# filename: huffman_errors.py


class HuffmanError(Exception):
    """Base class for every failure the codec reports."""


class MalformedHeader(HuffmanError, ValueError):
    """The compressed input is too short to hold the frequency table."""


class InconsistentFrequencyTable(HuffmanError, ValueError):
    """The frequency table does not agree with the packed bit stream."""


class AllocationFailure(HuffmanError, MemoryError):
    """The output buffer could not be provided by the allocator."""
