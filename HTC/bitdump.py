import argparse
from bitpack import BitReader
from codec_core import open_stream, SourceUnavailable

def format_bits(br: BitReader) -> str:
    """All remaining bits as 0/1, nibbles split by ' ', bytes by ' , '."""
    parts = []
    i = 0
    while not br.at_end():
        if i and i % 8 == 0:
            parts.append(" , ")
        elif i and i % 4 == 0:
            parts.append(" ")
        parts.append("1" if br.read_bit() else "0")
        i += 1
    return "".join(parts)

def main(argv=None):
    ap = argparse.ArgumentParser(description="Print a file as bits, MSB first")
    ap.add_argument("file", help="file to dump")
    args = ap.parse_args(argv)

    try:
        with open_stream(args.file, "rb") as f:
            print(format_bits(BitReader(f)))
    except SourceUnavailable as e:
        raise SystemExit(f"[bitdump] {e}")

if __name__ == "__main__":
    main()
