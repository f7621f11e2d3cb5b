# filename: huffman_bits.py

class BitCursor:
    """Write position inside a pre-zeroed bytearray, MSB first."""

    def __init__(self, buffer, byte=0, bit=0):
        self.buffer = buffer
        self.byte = byte
        self.bit = bit

    def write(self, bits, value):
        """OR the low `bits` bits of `value` into the buffer and advance."""
        if bits <= 0:
            return
        value &= (1 << bits) - 1
        while bits > 0:
            bits_left_in_byte = 8 - self.bit
            if bits < bits_left_in_byte:
                self.buffer[self.byte] |= value << (bits_left_in_byte - bits)
                self.bit += bits
                bits = 0
            else:
                self.buffer[self.byte] |= value >> (bits - bits_left_in_byte)
                value &= (1 << (bits - bits_left_in_byte)) - 1
                self.bit = 0
                self.byte += 1
                bits -= bits_left_in_byte

    def tell(self):
        return self.byte * 8 + self.bit


class BitCursorRead:
    """Read position inside a byte buffer; the buffer is never modified."""

    def __init__(self, buffer, byte=0, bit=0):
        self.buffer = buffer
        self.byte = byte
        self.bit = bit

    def read(self, bits):
        """Return the next `bits` bits as an integer and advance."""
        data = 0
        while bits > 0:
            if self.byte >= len(self.buffer):
                raise EOFError(f"bit stream exhausted at byte {self.byte}")
            bits_left_in_byte = 8 - self.bit
            take = bits if bits < bits_left_in_byte else bits_left_in_byte
            mask = (1 << take) - 1
            chunk = (self.buffer[self.byte] >> (bits_left_in_byte - take)) & mask
            data = (data << take) | chunk
            bits -= take
            self.bit += take
            if self.bit == 8:
                self.bit = 0
                self.byte += 1
        return data

    def tell(self):
        return self.byte * 8 + self.bit
