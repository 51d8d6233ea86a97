# core/reconstruct.py

"""Stream reconstruction: copying ordered parts into the output file."""
import shutil
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from tqdm import tqdm

from core.config import Config
from core.data_structures import OrderedParts, ReconstructionSummary, ScanResult
from core.deserialized_file import DeserializedFile
from core.errors import CacheIOError, PathError
from core.part_order import covered_end, order_parts, print_report
from core.serialized_file import SerializedFile


def write_to_deserialized_file(serialized: SerializedFile, ordered: OrderedParts,
                               deserialized: DeserializedFile,
                               segments: Sequence[Path] = (),
                               show_progress: bool = True,
                               verbose: bool = True) -> ReconstructionSummary:
    """
    Copies every part, in destination order, from its source offset to its
    destination offset. Gaps no part covers are left to the filesystem.

    The output file is consumed: it is closed when this returns or raises,
    and a partially written file is left in place on failure.
    """
    with deserialized:
        total = sum(part.size for part in ordered.parts)
        bytes_written = 0
        with tqdm(total=total, unit='B', unit_scale=True, desc="Writing parts",
                  file=sys.stderr, disable=not show_progress) as pbar:
            for part in ordered.parts:
                part_bytes = serialized.read_part(part)
                if verbose:
                    tqdm.write(f"[write] writing {part.size} from {serialized.name}@{part.source_offset} "
                               f"to {deserialized.name}@{part.dest_offset}", file=sys.stderr)
                deserialized.write_at(part.dest_offset, part_bytes)
                bytes_written += part.size
                pbar.update(part.size)

        appended = 0
        if segments:
            appended = append_segments(deserialized, segments, covered_end(ordered.parts),
                                       verbose=verbose)

        return ReconstructionSummary(len(ordered.parts), bytes_written,
                                     deserialized.size(), appended)


def _check_segments(segments: Sequence[Path]):
    for segment in segments:
        if not Path(segment).is_file():
            raise PathError(f"'{segment}' not accessible or does not exist")


def append_segments(deserialized: DeserializedFile, segments: Sequence[Path],
                    start_offset: int, verbose: bool = True) -> int:
    """
    Appends raw continuation segments after the contiguous prefix.

    Continuation cache files are stored unserialized, so they are plain
    concatenation. Anything the serialized file placed past start_offset
    came from a forward seek and is discarded first.
    """
    _check_segments(segments)

    if verbose:
        print(f"[append] truncating {deserialized.name} at offset={start_offset}", file=sys.stderr)
    deserialized.truncate(start_offset)

    appended = 0
    offset = start_offset
    for segment in segments:
        segment = Path(segment)
        try:
            with segment.open('rb') as src:
                shutil.copyfileobj(src, deserialized.file)
                copied = src.tell()
        except OSError as e:
            raise CacheIOError(f"failed to append '{segment}' to '{deserialized.name}'@{offset}: {e}",
                               name=deserialized.name, offset=offset, operation="append") from e
        if verbose:
            print(f"[append] appended {copied} bytes from {segment} at offset={offset}", file=sys.stderr)
        offset += copied
        appended += copied
    return appended


def deserialize_file(serialized_path: Path, deserialized_path: Path,
                     config: Optional[Config] = None,
                     segments: Sequence[Path] = ()) -> Tuple[ScanResult, OrderedParts, ReconstructionSummary]:
    """
    Runs a whole deserialization: scan, order, reconstruct.

    Both paths are checked and opened before any scanning, so a path error
    leaves no output behind.
    """
    config = config or Config()
    verbose = config.get('verbose', True)
    _check_segments(segments)

    with SerializedFile.from_path(serialized_path,
                                  read_buffer_size=config.get('read_buffer_size'),
                                  verbose=verbose) as serialized, \
            DeserializedFile.from_path(deserialized_path) as deserialized:
        scan = serialized.get_info()
        ordered = order_parts(scan.parts)
        if verbose:
            print_report(ordered)
        summary = write_to_deserialized_file(
            serialized, ordered, deserialized, segments,
            show_progress=config.get('show_progress', True), verbose=verbose,
        )
    return scan, ordered, summary
