# core/part_order.py

"""Ordering parts by destination offset and finding the contiguous prefix."""
import sys
from typing import Dict, List, Optional

from core.data_structures import PartDescriptor, ContiguityReport, OrderedParts
from utils.file_utils import format_size


def order_parts(parts: List[PartDescriptor]) -> OrderedParts:
    """
    Sorts a catalog by dest_offset. The sort is stable, so duplicate
    offsets keep their discovery order.

    With two or more parts, also reports the contiguous run starting at the
    first part. Everything after the first gap may be a tail fragment the
    cache writer stored ahead of time (a trailing container index, say), so
    callers should only trust the output up to last_contiguous_offset as
    linearly playable.
    """
    ordered = sorted(parts, key=lambda p: p.dest_offset)
    if len(ordered) < 2:
        return OrderedParts(ordered, None)

    last_contiguous_i = 0
    for i in range(1, len(ordered)):
        if ordered[i].dest_offset != ordered[i - 1].dest_end:
            break
        last_contiguous_i = i

    first_part = ordered[0]
    last_part = ordered[-1]
    last_contiguous = ordered[last_contiguous_i]
    last_contiguous_offset = last_contiguous.dest_end
    # Overlapping or fully contiguous catalogs have no gap to report
    discontinuity_len = max(0, last_part.dest_offset - last_contiguous_offset)

    report = ContiguityReport(first_part, last_part, last_contiguous,
                              last_contiguous_offset, discontinuity_len)
    return OrderedParts(ordered, report)


def covered_end(parts: List[PartDescriptor]) -> int:
    """
    End of the gap-free stretch starting at the first ordered part.

    Unlike last_contiguous_offset, parts overlapping the stretch extend it,
    so no in-order byte is cut off.
    """
    if not parts:
        return 0
    end = parts[0].dest_end
    for part in parts[1:]:
        if part.dest_offset > end:
            break
        end = max(end, part.dest_end)
    return end


def _describe(part: PartDescriptor) -> str:
    return (f"PartInfo {{ in_offset: {part.source_offset}, "
            f"out_offset: {part.dest_offset}, part_size: {part.size} }}")


def format_report(ordered: OrderedParts) -> str:
    """Human readable summary of an ordered catalog."""
    report = ordered.report
    if report is None:
        return (f"\n=======\nAfter ordering part info by out_offset: "
                f"{len(ordered.parts)} part(s), nothing to compare\n=======")
    return (
        "\n=======\nAfter ordering part info by out_offset:\n"
        f" First part: {_describe(report.first_part)}\n"
        f" Last contiguous: {_describe(report.last_contiguous)}\n"
        f" Last contiguous offset: {report.last_contiguous_offset} "
        f"({format_size(report.last_contiguous_offset)}) "
        f"(Discontinuity: {report.discontinuity_len} bytes)\n"
        f" Last part: {_describe(report.last_part)}\n"
        "======="
    )


def report_to_dict(ordered: OrderedParts) -> Optional[Dict]:
    report = ordered.report
    if report is None:
        return None
    return {
        "first_part": report.first_part._asdict(),
        "last_part": report.last_part._asdict(),
        "last_contiguous": report.last_contiguous._asdict(),
        "last_contiguous_offset": report.last_contiguous_offset,
        "discontinuity_len": report.discontinuity_len,
    }


def print_report(ordered: OrderedParts):
    print(format_report(ordered), file=sys.stderr)
