import numpy as np

def compression_ratio(original_bytes: int, compressed_bytes: int) -> float:
    if compressed_bytes == 0:
        return float("inf")
    return float(original_bytes) / float(compressed_bytes)

def bits_per_byte(bits: int, n: int) -> float:
    if n == 0:
        return 0.0
    return float(bits) / float(n)

def entropy(freqs) -> float:
    """Shannon entropy of a frequency table, in bits per symbol."""
    f = np.asarray(freqs, dtype=np.float64)
    total = f.sum()
    if total == 0:
        return 0.0
    p = f[f > 0] / total
    return float(-(p * np.log2(p)).sum())

def redundancy(freqs, lengths) -> float:
    """Average code length minus entropy (>= 0 for a valid prefix code)."""
    f = np.asarray(freqs, dtype=np.float64)
    total = f.sum()
    if total == 0:
        return 0.0
    avg = float(np.dot(f, np.asarray(lengths, dtype=np.float64)) / total)
    return avg - entropy(f)
