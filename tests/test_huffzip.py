import pytest

import container
import huffzip


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"she sells sea shells by the sea shore\n" * 20)
    return path


def test_default_output_names(tmp_path):
    src = tmp_path / "a.txt"
    assert huffzip.default_output(src, "compress") == tmp_path / "a.txt.huff"
    assert huffzip.default_output(tmp_path / "a.txt.huff", "decompress") == src
    assert huffzip.default_output(tmp_path / "a.bin", "decompress") == tmp_path / "a.bin.out"


def test_compress_then_decompress(sample, tmp_path, capsys):
    assert huffzip.main(["compress", str(sample)]) == 0
    packed = tmp_path / "notes.txt.huff"
    assert container.decompress(packed.read_bytes()) == sample.read_bytes()
    assert "notes.txt" in capsys.readouterr().out

    restored = tmp_path / "restored.txt"
    assert huffzip.main(["decompress", str(packed), "-o", str(restored)]) == 0
    assert restored.read_bytes() == sample.read_bytes()


def test_refuses_to_overwrite_without_force(sample, tmp_path):
    target = tmp_path / "notes.txt.huff"
    target.write_bytes(b"keep me")
    assert huffzip.main(["compress", str(sample)]) == 1
    assert target.read_bytes() == b"keep me"

    assert huffzip.main(["compress", str(sample), "--force"]) == 0
    assert target.read_bytes() != b"keep me"


def test_corrupt_input_leaves_no_output(tmp_path):
    bad = tmp_path / "bad.huff"
    bad.write_bytes(b"not a container at all")
    assert huffzip.main(["decompress", str(bad)]) == 1
    assert not (tmp_path / "bad").exists()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["bad.huff"]


def test_missing_input(tmp_path):
    assert huffzip.main(["compress", str(tmp_path / "nope.txt")]) == 1


def test_info(sample, tmp_path, capsys):
    huffzip.main(["compress", str(sample)])
    capsys.readouterr()
    assert huffzip.main(["info", str(tmp_path / "notes.txt.huff")]) == 0
    out = capsys.readouterr().out
    assert f"symbols:       {len(sample.read_bytes())}" in out


def test_empty_file_roundtrip(tmp_path):
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    assert huffzip.main(["-v", "compress", str(empty)]) == 0
    assert huffzip.main(["decompress", str(tmp_path / "empty.huff"), "-o", str(tmp_path / "back")]) == 0
    assert (tmp_path / "back").read_bytes() == b""


def test_usage_error_exits_2():
    with pytest.raises(SystemExit) as exc:
        huffzip.main([])
    assert exc.value.code == 2
