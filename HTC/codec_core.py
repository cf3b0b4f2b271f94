from __future__ import annotations
import io
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from bitpack import BitReader, BitWriter, EndOfStream
from huffman import Code, HuffmanTree, TruncatedTree

TREE_EXT = ".ht"       # serialized tree
CODE_EXT = ".htcode"   # padding + payload
CHUNK_SIZE = 1 << 16


class SourceUnavailable(OSError):
    pass


class SinkUnavailable(OSError):
    pass


class MalformedPadding(ValueError):
    pass


class MalformedTree(ValueError):
    pass


@dataclass
class EncodeStats:
    input_bytes: int
    symbols: int          # distinct byte values
    payload_bits: int     # code bits, padding excluded
    pad_bits: int
    tree_bytes: int
    code_bytes: int
    freqs: Optional[np.ndarray] = None
    lengths: Optional[np.ndarray] = None


@dataclass
class DecodeStats:
    tree_leaves: int
    pad_bits: int
    output_bytes: int
    discarded_bits: int   # bits of an unfinished code at end of stream


def count_frequencies(f, chunk_size: int = CHUNK_SIZE) -> Tuple[np.ndarray, Optional[bytes]]:
    """
    One full pass over f.

    Returns (freqs, buffered). buffered is None when f can be rewound for the
    second pass; otherwise it holds every byte read.
    """
    freqs = np.zeros(256, dtype=np.int64)
    seekable = f.seekable() if hasattr(f, "seekable") else False
    keep = None if seekable else bytearray()
    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            break
        freqs += np.bincount(np.frombuffer(chunk, dtype=np.uint8), minlength=256)
        if keep is not None:
            keep += chunk
    return freqs, (None if keep is None else bytes(keep))


def code_lengths(dictionary: Dict[int, Code]) -> np.ndarray:
    lengths = np.zeros(256, dtype=np.int64)
    for sym, code in dictionary.items():
        lengths[sym] = len(code)
    return lengths


def payload_bits(freqs, dictionary: Dict[int, Code]) -> int:
    return int(np.dot(np.asarray(freqs, dtype=np.int64), code_lengths(dictionary)))


def padding_bits(total_bits: int) -> int:
    """Padding length in 1..8; a full byte when total_bits is already aligned."""
    return 8 - (total_bits % 8)


def _packed_codes(dictionary: Dict[int, Code]) -> Dict[int, Tuple[int, int]]:
    out = {}
    for sym, code in dictionary.items():
        v = 0
        for bit in code:
            v = (v << 1) | bit
        out[sym] = (v, len(code))
    return out


class _Source:
    """Read side of a stream; read errors become SourceUnavailable."""

    def __init__(self, f, name="input"):
        self._f = f
        self._name = name

    def read(self, n=-1):
        try:
            return self._f.read(n)
        except OSError as e:
            raise SourceUnavailable(f"cannot read {self._name}: {e.strerror or e}") from e

    def seekable(self):
        return self._f.seekable() if hasattr(self._f, "seekable") else False

    def seek(self, pos):
        return self._f.seek(pos)

    def tell(self):
        return self._f.tell()


class _Sink:
    """Write side of a stream; counts bytes, write errors become SinkUnavailable."""

    def __init__(self, f, name="output"):
        self._f = f
        self._name = name
        self.count = 0

    def write(self, b):
        try:
            n = self._f.write(b)
        except OSError as e:
            raise SinkUnavailable(f"cannot write {self._name}: {e.strerror or e}") from e
        self.count += len(b)
        return n


def _encode_counted(freqs, src, start, buffered, tree_out, code_out,
                    tree_name="tree output", code_name="code output") -> EncodeStats:
    tree = HuffmanTree.from_frequencies(freqs)
    tree_sink = _Sink(tree_out, tree_name)
    with BitWriter(tree_sink) as bw:
        tree.serialize(bw)

    dictionary = tree.dictionary()
    total = payload_bits(freqs, dictionary)
    pad = padding_bits(total)
    codes = _packed_codes(dictionary)

    if buffered is not None:
        src = io.BytesIO(buffered)
    else:
        src.seek(start)

    code_sink = _Sink(code_out, code_name)
    with BitWriter(code_sink) as bw:
        # padding: (pad - 1) ones then a zero
        bw.write_code((1 << pad) - 2, pad)
        while True:
            chunk = src.read(CHUNK_SIZE)
            if not chunk:
                break
            for b in chunk:
                code, L = codes[b]
                bw.write_code(code, L)

    return EncodeStats(
        input_bytes=int(freqs.sum()),
        symbols=int(np.count_nonzero(freqs)),
        payload_bits=total,
        pad_bits=pad,
        tree_bytes=tree_sink.count,
        code_bytes=code_sink.count,
        freqs=freqs,
        lengths=code_lengths(dictionary),
    )


def encode(src, tree_out, code_out) -> Optional[EncodeStats]:
    """
    Encode the binary stream src into a tree stream and a code stream.

    src is read twice when it is seekable and buffered otherwise. Empty input
    writes nothing and returns None.
    """
    src = _Source(src)
    start = src.tell() if src.seekable() else 0
    freqs, buffered = count_frequencies(src)
    if freqs.sum() == 0:
        return None
    return _encode_counted(freqs, src, start, buffered, tree_out, code_out)


def read_tree(src, name="tree input") -> HuffmanTree:
    """Deserialize a tree; it must have at least one branch to decode with."""
    tree = HuffmanTree.deserialize(BitReader(_Source(src, name)))
    if tree.is_leaf(tree.root):
        raise MalformedTree("Malformed stream: tree has no branches")
    return tree


def skip_padding(br: BitReader) -> int:
    """Consume ones up to and including the first zero; return bits consumed."""
    n = 0
    while True:
        if br.at_end():
            raise MalformedPadding("Malformed stream: padding not terminated")
        n += 1
        if br.read_bit() == 0:
            return n


def decode_payload(tree: HuffmanTree, br: BitReader, out) -> Tuple[int, int]:
    """
    Walk the tree bit by bit and write a byte at every leaf.

    Returns (bytes written, trailing bits discarded). Bits of an unfinished
    code at end of stream are dropped.
    """
    left = tree.left.tolist()
    right = tree.right.tolist()
    value = tree.value.tolist()
    root = tree.root
    if left[root] == -1:
        raise MalformedTree("Malformed stream: tree has no branches")

    buf = bytearray()
    written = 0
    cur = root
    depth = 0
    while not br.at_end():
        cur = right[cur] if br.read_bit() else left[cur]
        depth += 1
        if left[cur] == -1:
            buf.append(value[cur])
            cur = root
            depth = 0
            if len(buf) >= CHUNK_SIZE:
                out.write(bytes(buf))
                written += len(buf)
                buf.clear()
    if buf:
        out.write(bytes(buf))
        written += len(buf)
    return written, depth


def decode(tree_src, code_src, out) -> DecodeStats:
    tree = read_tree(tree_src)
    br = BitReader(_Source(code_src, "code input"))
    pad = skip_padding(br)
    n, discarded = decode_payload(tree, br, _Sink(out))
    return DecodeStats(
        tree_leaves=len(tree.leaves()),
        pad_bits=pad,
        output_bytes=n,
        discarded_bits=discarded,
    )


def open_stream(path, mode):
    try:
        return open(path, mode)
    except OSError as e:
        err = SourceUnavailable if "r" in mode else SinkUnavailable
        raise err(f"cannot open {path}: {e.strerror}") from e


def encode_file(path, tree_path=None, code_path=None) -> Optional[EncodeStats]:
    """
    Write <path>.ht and <path>.htcode. Empty input creates no files, and
    neither file is left behind when the other cannot be opened.
    """
    path = str(path)
    tree_path = tree_path or path + TREE_EXT
    code_path = code_path or path + CODE_EXT
    with open_stream(path, "rb") as f:
        src = _Source(f, path)
        freqs, buffered = count_frequencies(src)
        if freqs.sum() == 0:
            return None
        tree_out = open_stream(tree_path, "wb")
        try:
            code_out = open_stream(code_path, "wb")
        except SinkUnavailable:
            tree_out.close()
            os.remove(tree_path)
            raise
        with tree_out, code_out:
            return _encode_counted(freqs, src, 0, buffered, tree_out, code_out,
                                   tree_name=tree_path, code_name=code_path)


def decode_file(tree_path, code_path, out_path) -> DecodeStats:
    """Rebuild out_path. The output file is only created once the tree and
    the padding have been read."""
    with open_stream(tree_path, "rb") as tree_src:
        tree = read_tree(tree_src, tree_path)
    with open_stream(code_path, "rb") as code_src:
        br = BitReader(_Source(code_src, code_path))
        pad = skip_padding(br)
        with open_stream(out_path, "wb") as out:
            n, discarded = decode_payload(tree, br, _Sink(out, out_path))
    return DecodeStats(
        tree_leaves=len(tree.leaves()),
        pad_bits=pad,
        output_bytes=n,
        discarded_bits=discarded,
    )
