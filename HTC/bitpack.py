class EndOfStream(EOFError):
    pass


class BitWriter:
    """MSB-first bit writer over a binary sink (anything with write())."""

    FLUSH_AT = 4096

    def __init__(self, f):
        self._f = f
        self._buf = bytearray()
        self._cur = 0
        self._nbits = 0  # bits currently in _cur (0..7)
        self._closed = False
        self.bits_written = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def _emit(self, byte: int):
        self._buf.append(byte)
        if len(self._buf) >= self.FLUSH_AT:
            self._f.write(bytes(self._buf))
            self._buf.clear()

    def _check_open(self):
        if self._closed:
            raise ValueError("write to closed BitWriter")

    def write_bit(self, bit):
        self._check_open()
        self._cur = (self._cur << 1) | (1 if bit else 0)
        self._nbits += 1
        self.bits_written += 1
        if self._nbits == 8:
            self._emit(self._cur)
            self._cur = 0
            self._nbits = 0

    def write_byte(self, value: int):
        """Write all 8 bits of value; the buffer need not be byte-aligned."""
        self._check_open()
        acc = (self._cur << 8) | (value & 0xFF)
        self._emit(acc >> self._nbits)
        self._cur = acc & ((1 << self._nbits) - 1)
        self.bits_written += 8

    def write_code(self, code: int, length: int):
        """Write 'length' bits of code (MSB-first)."""
        self._check_open()
        for i in range(length - 1, -1, -1):
            self._cur = (self._cur << 1) | ((code >> i) & 1)
            self._nbits += 1
            if self._nbits == 8:
                self._emit(self._cur)
                self._cur = 0
                self._nbits = 0
        self.bits_written += length

    def close(self):
        """Pad remaining bits with zeros and hand everything to the sink.

        The wrapped stream itself is left open for its owner to close.
        """
        if self._closed:
            return
        if self._nbits > 0:
            self._buf.append(self._cur << (8 - self._nbits))
            self._cur = 0
            self._nbits = 0
        if self._buf:
            self._f.write(bytes(self._buf))
            self._buf.clear()
        self._closed = True


class BitReader:
    """MSB-first bit reader over a binary source (anything with read()).

    One byte is kept buffered ahead, so at_end() turns true as soon as the
    last bit of the source has been consumed.
    """

    def __init__(self, f):
        self._f = f
        self._cur = None
        self._left = 0  # unread bits in _cur (1..8); 0 only at end
        self.bits_read = 0
        self._load()

    def _load(self):
        b = self._f.read(1)
        if b:
            self._cur = b[0]
            self._left = 8
        else:
            self._cur = None
            self._left = 0

    def at_end(self) -> bool:
        return self._cur is None

    def read_bit(self) -> int:
        if self._cur is None:
            raise EndOfStream("Unexpected end of bitstream")
        self._left -= 1
        bit = (self._cur >> self._left) & 1
        self.bits_read += 1
        if self._left == 0:
            self._load()
        return bit

    def read_byte(self) -> int:
        if self._cur is None:
            raise EndOfStream("Unexpected end of bitstream")
        left = self._left
        head = self._cur & ((1 << left) - 1)
        self._load()
        if left == 8:
            self.bits_read += 8
            return head
        if self._cur is None:
            raise EndOfStream("Unexpected end of bitstream")
        self._left = left
        self.bits_read += 8
        return (head << (8 - left)) | (self._cur >> left)
