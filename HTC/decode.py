import argparse
from codec_core import decode_file, MalformedPadding, MalformedTree, TruncatedTree

def main(argv=None):
    ap = argparse.ArgumentParser(description="Rebuild a file from its .ht tree and .htcode payload")
    ap.add_argument("tree", help="path to .ht")
    ap.add_argument("code", help="path to .htcode")
    ap.add_argument("output", help="path to write the decoded file")
    args = ap.parse_args(argv)

    try:
        stats = decode_file(args.tree, args.code, args.output)
    except (OSError, TruncatedTree, MalformedTree, MalformedPadding) as e:
        raise SystemExit(f"[decode] {e}")

    print(f"[decode] wrote {args.output} ({stats.output_bytes} bytes)")
    print(f"[decode] leaves={stats.tree_leaves}, pad_bits={stats.pad_bits}")
    if stats.discarded_bits:
        print(f"[decode] dropped {stats.discarded_bits} trailing bits of an unfinished code")

if __name__ == "__main__":
    main()
