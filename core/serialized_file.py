# core/serialized_file.py

"""Reading the serialized media cache format.

A serialized cache file holds one or more *slices*. A slice header is a
little-endian u32 part count, followed by that many *parts*. A part header
is two little-endian u32 values, the offset of the part in the deserialized
stream and the payload size, followed by the payload itself.

Parts are neither contiguous nor ordered across slices: the cache writer
emulates a media player, so it may seek to a trailing index (an MP4 moov
atom for example) before coming back to linear writes in the next slice.

There is no end marker and no checksum. Scanning stops at end of file or at
the first header value outside the plausible range, and everything parsed
up to that point is kept. A few unexplained bytes usually follow the last
slice; they are left alone.
"""
import os
import struct
import sys
from pathlib import Path
from typing import List, Optional

from core.data_structures import (
    PartDescriptor, ScanStop, ScanResult,
    STOP_END_OF_FILE, STOP_TRUNCATED_PAYLOAD, STOP_TRUNCATED_HEADER,
    STOP_BAD_PART_COUNT, STOP_BAD_PART_SIZE,
)
from core.errors import CacheIOError, PathError, ShortPayloadRead, TruncatedRead

MAX_PARTS_COUNT = 80
MAX_PART_SIZE = 128 * 1024
DEFAULT_READ_BUFFER_SIZE = 4096


class SerializedFile:
    """
    An open serialized cache file. Use as a context manager so the handle
    is released on every exit path.
    """

    def __init__(self, name: str, file, file_size: int,
                 read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE, verbose: bool = True):
        self.name = name
        self.file = file
        self.file_size = file_size
        self.verbose = verbose
        self.rd_buf = bytearray(read_buffer_size)

    @classmethod
    def from_path(cls, path: Path, read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
                  verbose: bool = True) -> 'SerializedFile':
        """Opens an existing serialized file for reading."""
        path = Path(path)
        name = str(path)
        if not path.exists():
            raise PathError(f"'{name}' not accessible or does not exist")
        if not path.is_file():
            raise PathError(f"'{name}' is not a regular file")

        try:
            file = path.open('rb')
        except OSError as e:
            raise PathError(f"failed to open '{name}' for read: {e}") from e

        try:
            file_size = os.fstat(file.fileno()).st_size
        except OSError as e:
            file.close()
            raise PathError(f"failed to get metadata for '{name}': {e}") from e

        return cls(name, file, file_size, read_buffer_size, verbose)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        self.file.close()

    def _log(self, message: str):
        if self.verbose:
            print(f"[scan] {message}", file=sys.stderr)

    # --- Raw I/O ---

    def seek_from_start(self, offset: int) -> int:
        try:
            return self.file.seek(offset, os.SEEK_SET)
        except (OSError, ValueError) as e:
            raise CacheIOError(f"failed to seek '{self.name}' to offset={offset}: {e}",
                               name=self.name, offset=offset, operation="seek") from e

    def _seek_from_curr(self, offset: int) -> int:
        try:
            return self.file.seek(offset, os.SEEK_CUR)
        except (OSError, ValueError) as e:
            raise CacheIOError(
                f"failed to seek '{self.name}' from current position with offset={offset}: {e}",
                name=self.name, offset=offset, operation="seek") from e

    def get_pos(self) -> int:
        try:
            return self.file.tell()
        except OSError as e:
            raise CacheIOError(f"getting stream position of '{self.name}' failed: {e}",
                               name=self.name, operation="tell") from e

    def _read_exact(self, size: int) -> bytes:
        offset = self.get_pos()
        try:
            data = self.file.read(size)
        except OSError as e:
            raise CacheIOError(f"reading {size} bytes from '{self.name}'@{offset} failed: {e}",
                               name=self.name, offset=offset, operation="read") from e
        if len(data) < size:
            raise TruncatedRead(self.name, offset, size, len(data))
        return data

    # --- Header decoding ---

    def read_u32_le(self) -> int:
        """Decodes one little-endian u32 at the cursor. Raises TruncatedRead near EOF."""
        return struct.unpack('<L', self._read_exact(4))[0]

    def read_part_header(self):
        """Decodes a part header into (dest_offset, size)."""
        return struct.unpack('<LL', self._read_exact(8))

    # --- Catalog building ---

    def get_info(self) -> ScanResult:
        """
        Walks the file slice by slice and part by part, recording where each
        payload lives. Payloads are skipped with a forward seek, not read.

        Structural anomalies end the scan and are reported in the returned
        ScanResult; they are never raised.
        """
        parts: List[PartDescriptor] = []
        slice_i = 0
        in_offset = self.seek_from_start(0)

        while in_offset < self.file_size:
            stop = self._read_slice(slice_i, in_offset, parts)
            if stop is not None:
                self._log(f"in_offset={stop.offset}, stopped parsing with "
                          f"{stop.remaining} bytes remaining in file.")
                return ScanResult(parts, slice_i, stop, self.file_size)
            slice_i += 1
            in_offset = self.get_pos()

        self._log("reached EOF, will stop parsing..")
        stop = ScanStop(STOP_END_OF_FILE, in_offset, 0, slice_i)
        return ScanResult(parts, slice_i, stop, self.file_size)

    def _read_slice(self, slice_i: int, in_offset: int,
                    parts: List[PartDescriptor]) -> Optional[ScanStop]:
        """Reads one slice into parts; returns a ScanStop if scanning must end here."""
        try:
            part_count = self.read_u32_le()
        except TruncatedRead:
            self._log("reached EOF, will stop parsing..")
            return self._stop(STOP_TRUNCATED_HEADER, in_offset, slice_i)

        if part_count == 0 or part_count > MAX_PARTS_COUNT:
            self._log(f"Slice{slice_i}: in_offset={in_offset}, parsed parts={part_count} "
                      f"is zero or > max allowed({MAX_PARTS_COUNT}), will stop parsing..")
            return self._stop(STOP_BAD_PART_COUNT, in_offset, slice_i, value=part_count)

        self._log(f"Slice{slice_i}: in_offset={in_offset}, parts={part_count}")

        for part_i in range(part_count):
            header_offset = self.get_pos()
            try:
                out_offset, part_size = self.read_part_header()
            except TruncatedRead:
                self._log(f"Slice{slice_i}/Part{part_i}: in_offset={header_offset}, "
                          f"part header cut short by EOF, will stop parsing..")
                return self._stop(STOP_TRUNCATED_HEADER, header_offset, slice_i, part_i)

            if part_size == 0 or part_size > MAX_PART_SIZE:
                self._log(f"Slice{slice_i}/Part{part_i}: in_offset={header_offset}, "
                          f"part_size={part_size} is zero or > max_allowed({MAX_PART_SIZE}), "
                          f"will stop parsing..")
                return self._stop(STOP_BAD_PART_SIZE, header_offset, slice_i, part_i, part_size)

            source_offset = self.get_pos()
            self._log(f"Slice{slice_i}/Part{part_i}: in_offset={source_offset}, "
                      f"out_offset={out_offset}, part_size={part_size}")
            parts.append(PartDescriptor(source_offset, out_offset, part_size))
            if self._seek_from_curr(part_size) > self.file_size:
                self._log(f"Slice{slice_i}/Part{part_i}: part runs "
                          f"{source_offset + part_size - self.file_size} bytes past the end of file")
                return self._stop(STOP_TRUNCATED_PAYLOAD, source_offset, slice_i, part_i, part_size)

        return None

    def _stop(self, reason: str, offset: int, slice_i: int,
              part_i: Optional[int] = None, value: Optional[int] = None) -> ScanStop:
        return ScanStop(reason, offset, max(0, self.file_size - offset), slice_i, part_i, value)

    # --- Payload reading ---

    def read_part(self, part: PartDescriptor) -> bytes:
        """
        Reads a part's payload. Short reads are tolerated and accumulated
        through the fixed read buffer until the payload is complete; running
        out of source bytes first raises ShortPayloadRead.
        """
        self.seek_from_start(part.source_offset)
        part_buf = bytearray()
        view = memoryview(self.rd_buf)
        while len(part_buf) < part.size:
            want = min(len(self.rd_buf), part.size - len(part_buf))
            try:
                n = self.file.readinto(view[:want])
            except OSError as e:
                raise CacheIOError(
                    f"failed to read part of size {part.size} from '{self.name}'"
                    f"@{part.source_offset}: {e}",
                    name=self.name, offset=part.source_offset, operation="read") from e
            if not n:
                raise ShortPayloadRead(self.name, part.source_offset, part.size, len(part_buf))
            part_buf.extend(view[:n])
        return bytes(part_buf)
