from __future__ import annotations
import heapq
from typing import Dict, List, Tuple

import numpy as np

from bitpack import BitReader, BitWriter, EndOfStream

Code = Tuple[int, ...]  # path bits from the root, 0 = left, 1 = right

NSYM = 256
NIL = -1


class TruncatedTree(ValueError):
    pass


class HuffmanTree:
    """
    Binary Huffman tree over byte values, stored as an arena of parallel arrays.

    Node ids index left/right/value/weight. A leaf has left == right == NIL and
    a value in 0..255; an internal node has two children and value == NIL.
    Weights are only filled in for trees built from frequencies.
    """

    def __init__(self, left, right, value, weight, root: int):
        self.left = np.asarray(left, dtype=np.int32)
        self.right = np.asarray(right, dtype=np.int32)
        self.value = np.asarray(value, dtype=np.int32)
        self.weight = np.asarray(weight, dtype=np.int64)
        self.root = int(root)

    # ---- construction ----

    @classmethod
    def from_frequencies(cls, freqs) -> "HuffmanTree":
        """
        Build from a 256-entry frequency table.

        Ties are broken by (weight, order): a leaf's order is its byte value,
        the n-th merged node gets 256 + n. The first node popped becomes the
        left child.
        """
        freqs = np.asarray(freqs, dtype=np.int64)
        if freqs.shape != (NSYM,):
            raise ValueError(f"frequency table must have {NSYM} entries")
        symbols = np.flatnonzero(freqs > 0)
        if symbols.size == 0:
            raise ValueError("cannot build a tree from an empty frequency table")

        left: List[int] = []
        right: List[int] = []
        value: List[int] = []
        weight: List[int] = []

        def add(l, r, v, w):
            left.append(l)
            right.append(r)
            value.append(v)
            weight.append(w)
            return len(value) - 1

        if symbols.size == 1:
            # Edge case: only one symbol -> pair it with a zero-weight sibling
            # so it still gets a one-bit code (0).
            sym = int(symbols[0])
            a = add(NIL, NIL, sym, int(freqs[sym]))
            b = add(NIL, NIL, (sym + 1) % NSYM, 0)
            root = add(a, b, NIL, weight[a])
            return cls(left, right, value, weight, root)

        pq = []
        for s in symbols:
            s = int(s)
            pq.append((int(freqs[s]), s, add(NIL, NIL, s, int(freqs[s]))))
        heapq.heapify(pq)
        merged = 0
        while len(pq) > 1:
            wa, _, a = heapq.heappop(pq)
            wb, _, b = heapq.heappop(pq)
            node = add(a, b, NIL, wa + wb)
            heapq.heappush(pq, (wa + wb, NSYM + merged, node))
            merged += 1
        return cls(left, right, value, weight, pq[0][2])

    # ---- traversal ----

    def __len__(self):
        return int(self.value.size)

    def is_leaf(self, node: int) -> bool:
        return bool(self.left[node] == NIL)

    def child(self, node: int, bit) -> int:
        return int(self.right[node] if bit else self.left[node])

    def value_of(self, node: int) -> int:
        return int(self.value[node])

    def leaves(self) -> List[int]:
        """Leaf values in pre-order."""
        out = []
        stack = [self.root]
        while stack:
            n = stack.pop()
            if self.is_leaf(n):
                out.append(int(self.value[n]))
            else:
                stack.append(int(self.right[n]))
                stack.append(int(self.left[n]))
        return out

    def depth(self) -> int:
        return max((len(c) for c in self.dictionary().values()), default=0)

    def dictionary(self) -> Dict[int, Code]:
        """Map each leaf value to the path that reaches it."""
        codes: Dict[int, Code] = {}
        stack: List[Tuple[int, Code]] = [(self.root, ())]
        while stack:
            n, path = stack.pop()
            if self.is_leaf(n):
                codes[int(self.value[n])] = path
            else:
                stack.append((int(self.right[n]), path + (1,)))
                stack.append((int(self.left[n]), path + (0,)))
        return codes

    def format_dictionary(self) -> str:
        lines = []
        for sym, code in sorted(self.dictionary().items()):
            lines.append(f"{chr(sym)}: {''.join(str(b) for b in code)}")
        return "\n".join(lines)

    def __str__(self):
        return self.format_dictionary()

    # ---- serialization ----

    def serialize(self, bw: BitWriter):
        """Pre-order: internal node -> 1, left, right; leaf -> 0, value byte."""
        stack = [self.root]
        while stack:
            n = stack.pop()
            if self.is_leaf(n):
                bw.write_bit(0)
                bw.write_byte(int(self.value[n]))
            else:
                bw.write_bit(1)
                stack.append(int(self.right[n]))
                stack.append(int(self.left[n]))

    @classmethod
    def deserialize(cls, br: BitReader) -> "HuffmanTree":
        left: List[int] = []
        right: List[int] = []
        value: List[int] = []
        pending: List[int] = []  # internal nodes still missing a child
        root = NIL
        try:
            while True:
                if br.read_bit():
                    v = NIL
                else:
                    v = br.read_byte()
                left.append(NIL)
                right.append(NIL)
                value.append(v)
                node = len(value) - 1
                if pending:
                    parent = pending[-1]
                    if left[parent] == NIL:
                        left[parent] = node
                    else:
                        right[parent] = node
                        pending.pop()
                else:
                    root = node
                if v == NIL:
                    pending.append(node)
                if not pending:
                    break
        except EndOfStream as e:
            raise TruncatedTree("Malformed stream: tree truncated") from e
        return cls(left, right, value, [0] * len(value), root)
