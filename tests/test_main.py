import json

import pytest

from conftest import pattern
from main import main


SLICES = [
    [(0, pattern(64, 1)), (64, pattern(64, 2))],
    [(512, pattern(32, 3))],
]


def run(tmp_path, *args):
    return main([*args, '--config', str(tmp_path / "config.json"), '--no-progress'])


@pytest.mark.parametrize("argv", [[], ["only-one"], ["a", "b", "c"]])
def test_wrong_argument_count(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code != 0
    assert "usage:" in capsys.readouterr().err


def test_successful_run(make_serialized, tmp_path, capsys):
    src = make_serialized(SLICES)
    dst = tmp_path / "out.mp4"

    assert run(tmp_path, str(src), str(dst)) == 0

    data = dst.read_bytes()
    assert len(data) == 544
    assert data[:128] == pattern(64, 1) + pattern(64, 2)
    assert data[512:] == pattern(32, 3)
    err = capsys.readouterr().err
    assert "Parsed 2 slice(s), 3 part(s)" in err
    assert "Contiguous up to 128 bytes" in err


def test_existing_output_is_an_error(make_serialized, tmp_path, capsys):
    src = make_serialized(SLICES)
    dst = tmp_path / "out.mp4"
    dst.write_bytes(b"old")

    assert run(tmp_path, str(src), str(dst)) == 1
    assert "already exists" in capsys.readouterr().err
    assert dst.read_bytes() == b"old"


def test_missing_input_is_an_error(tmp_path, capsys):
    dst = tmp_path / "out.mp4"
    assert run(tmp_path, str(tmp_path / "missing"), str(dst)) == 1
    assert "does not exist" in capsys.readouterr().err
    assert not dst.exists()


def test_json_report(make_serialized, tmp_path, capsys):
    src = make_serialized(SLICES, trailing=b"\x00\x00\x00\x00junk")
    dst = tmp_path / "out.mp4"

    assert run(tmp_path, str(src), str(dst), '--quiet', '--report', 'json') == 0

    out = capsys.readouterr().out
    report = json.loads(out)
    assert report["slices"] == 2
    assert report["parts"] == 3
    assert report["stop"]["reason"] == "bad_part_count"
    assert report["stop"]["remaining"] == 8
    assert report["contiguity"]["last_contiguous_offset"] == 128
    assert report["contiguity"]["discontinuity_len"] == 384
    assert report["output_size"] == 544


def test_quiet_suppresses_part_lines(make_serialized, tmp_path, capsys):
    src = make_serialized(SLICES)
    assert run(tmp_path, str(src), str(tmp_path / "out"), '--quiet') == 0
    err = capsys.readouterr().err
    assert "Slice0" not in err
    assert "Wrote" in err


def test_append_option(make_serialized, tmp_path):
    src = make_serialized(SLICES)
    seg = tmp_path / "seg"
    seg.write_bytes(b"continued")
    dst = tmp_path / "out"

    assert run(tmp_path, str(src), str(dst), '--quiet', '--append', str(seg)) == 0
    assert dst.read_bytes() == pattern(64, 1) + pattern(64, 2) + b"continued"


def test_invalid_buffer_size(make_serialized, tmp_path, capsys):
    src = make_serialized(SLICES)
    dst = tmp_path / "out"
    assert run(tmp_path, str(src), str(dst), '--buffer-size', '0') == 1
    assert "invalid buffer size" in capsys.readouterr().err
    assert not dst.exists()


def test_config_file_defaults(make_serialized, tmp_path, capsys):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"verbose": False, "report_format": "json"}))
    src = make_serialized(SLICES)

    assert main([str(src), str(tmp_path / "out"), '--config', str(config_file), '--no-progress']) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out)["parts"] == 3
    assert "Slice0" not in captured.err


@pytest.mark.parametrize("value", ["4096", None, 0, -5, True])
def test_bad_buffer_size_in_config_file(make_serialized, tmp_path, capsys, value):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"read_buffer_size": value}))
    src = make_serialized(SLICES)
    dst = tmp_path / "out"

    assert main([str(src), str(dst), '--config', str(config_file), '--no-progress']) == 1
    assert "invalid buffer size" in capsys.readouterr().err
    assert not dst.exists()
