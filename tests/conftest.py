import struct

import pytest

from core.config import Config


def serialize(slices, trailing=b""):
    """
    Builds a serialized cache file body.

    slices is a list of slices, each a list of (dest_offset, payload) pairs.
    """
    out = bytearray()
    for parts in slices:
        out += struct.pack('<L', len(parts))
        for dest_offset, payload in parts:
            out += struct.pack('<LL', dest_offset, len(payload))
            out += payload
    out += trailing
    return bytes(out)


def pattern(size, seed):
    return bytes((seed + i) % 251 for i in range(size))


@pytest.fixture
def make_serialized(tmp_path):
    def _make(slices, trailing=b"", name="serialized.bin"):
        path = tmp_path / name
        path.write_bytes(serialize(slices, trailing))
        return path
    return _make


@pytest.fixture
def quiet_config(tmp_path):
    config = Config(tmp_path / "config.json")
    config.set('verbose', False)
    config.set('show_progress', False)
    return config
