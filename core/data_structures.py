"""Core data structures for the media cache deserializer."""
from typing import List, Optional, NamedTuple

# Stop reasons reported by the part catalog builder
STOP_END_OF_FILE = 'end_of_file'
STOP_TRUNCATED_PAYLOAD = 'truncated_payload'
STOP_TRUNCATED_HEADER = 'truncated_header'
STOP_BAD_PART_COUNT = 'bad_part_count'
STOP_BAD_PART_SIZE = 'bad_part_size'

class PartDescriptor(NamedTuple):
    """One byte range recovered from the serialized file."""
    source_offset: int
    dest_offset: int
    size: int

    @property
    def dest_end(self) -> int:
        return self.dest_offset + self.size

class ScanStop(NamedTuple):
    """Where and why the catalog builder stopped scanning."""
    reason: str
    offset: int
    remaining: int
    slice_index: int
    part_index: Optional[int] = None
    value: Optional[int] = None

class ScanResult(NamedTuple):
    """Parts recovered by a scan, in discovery order, plus the stop diagnostic."""
    parts: List[PartDescriptor]
    slices: int
    stop: ScanStop
    file_size: int

class ContiguityReport(NamedTuple):
    """Summary of the contiguous prefix of an ordered catalog."""
    first_part: PartDescriptor
    last_part: PartDescriptor
    last_contiguous: PartDescriptor
    last_contiguous_offset: int
    discontinuity_len: int

class OrderedParts(NamedTuple):
    """A catalog sorted by destination offset."""
    parts: List[PartDescriptor]
    report: Optional[ContiguityReport] = None

class ReconstructionSummary(NamedTuple):
    """What a reconstruction run wrote."""
    parts_written: int
    bytes_written: int
    output_size: int
    appended_bytes: int = 0
