import pytest

import bitdump
import decode
import encode


def test_encode_decode_cli(tmp_path, capsys):
    src = tmp_path / "notes.txt"
    data = b"the quick brown fox jumps over the lazy dog\n" * 20
    src.write_bytes(data)

    encode.main([str(src)])
    out = capsys.readouterr().out
    assert "[encode] wrote" in out
    assert "ratio=" in out

    dst = tmp_path / "notes.out"
    decode.main([str(src) + ".ht", str(src) + ".htcode", str(dst)])
    out = capsys.readouterr().out
    assert f"[decode] wrote {dst}" in out
    assert dst.read_bytes() == data


def test_encode_cli_empty(tmp_path, capsys):
    src = tmp_path / "empty"
    src.write_bytes(b"")
    encode.main([str(src)])
    assert "nothing written" in capsys.readouterr().out
    assert not (tmp_path / "empty.ht").exists()


def test_cli_missing_files(tmp_path):
    with pytest.raises(SystemExit) as ei:
        encode.main([str(tmp_path / "missing")])
    assert "[encode]" in str(ei.value)
    with pytest.raises(SystemExit) as ei:
        decode.main([str(tmp_path / "a"), str(tmp_path / "b"), str(tmp_path / "c")])
    assert "[decode]" in str(ei.value)


def test_decode_cli_bad_padding(tmp_path):
    src = tmp_path / "x"
    src.write_bytes(b"ABC")
    encode.main([str(src)])
    bad = tmp_path / "x.bad"
    bad.write_bytes(b"\xff")
    with pytest.raises(SystemExit) as ei:
        decode.main([str(tmp_path / "x.ht"), str(bad), str(tmp_path / "x.out")])
    assert "padding" in str(ei.value)


def test_bitdump(tmp_path, capsys):
    f = tmp_path / "abc"
    f.write_bytes(b"ABC")
    bitdump.main([str(f)])
    assert capsys.readouterr().out == "0100 0001 , 0100 0010 , 0100 0011\n"


def test_cli_requires_positionals():
    with pytest.raises(SystemExit):
        decode.main(["only-one"])


def test_decode_cli_branchless_tree(tmp_path):
    tree = tmp_path / "x.ht"
    tree.write_bytes(bytes([0x20, 0x80]))
    code = tmp_path / "x.htcode"
    code.write_bytes(b"\x00\x00")
    out = tmp_path / "x.out"
    with pytest.raises(SystemExit) as ei:
        decode.main([str(tree), str(code), str(out)])
    assert "[decode]" in str(ei.value)
    assert "no branches" in str(ei.value)
    assert not out.exists()
