import argparse
from codec_core import encode_file, TREE_EXT, CODE_EXT
from metrics import compression_ratio, bits_per_byte, entropy, redundancy

def main(argv=None):
    ap = argparse.ArgumentParser(description="Huffman-encode a file into <input>.ht and <input>.htcode")
    ap.add_argument("input", help="file to encode")
    args = ap.parse_args(argv)

    try:
        stats = encode_file(args.input)
    except OSError as e:  # SourceUnavailable, SinkUnavailable, failed close
        raise SystemExit(f"[encode] {e}")

    if stats is None:
        print(f"[encode] {args.input} is empty, nothing written")
        return

    total_out = stats.tree_bytes + stats.code_bytes
    print(f"[encode] wrote {args.input + TREE_EXT} ({stats.tree_bytes} bytes)")
    print(f"[encode] wrote {args.input + CODE_EXT} ({stats.code_bytes} bytes)")
    print(f"[encode] input={stats.input_bytes} bytes, symbols={stats.symbols}, pad_bits={stats.pad_bits}")
    print(f"[encode] ratio={compression_ratio(stats.input_bytes, total_out):.3f}, "
          f"bits/byte={bits_per_byte(stats.payload_bits, stats.input_bytes):.3f}, "
          f"entropy={entropy(stats.freqs):.3f}, "
          f"redundancy={redundancy(stats.freqs, stats.lengths):.3f}")

if __name__ == "__main__":
    main()
