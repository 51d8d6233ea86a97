import random

from core.data_structures import PartDescriptor
from core.part_order import covered_end, order_parts, format_report, report_to_dict


def parts_from(pairs):
    # Source offsets are just distinct markers here
    return [PartDescriptor(1000 + i, off, size) for i, (off, size) in enumerate(pairs)]


def test_report_with_gap():
    ordered = order_parts(parts_from([(300, 20), (0, 100), (100, 50)]))
    report = ordered.report

    assert [p.dest_offset for p in ordered.parts] == [0, 100, 300]
    assert report.first_part.dest_offset == 0
    assert report.last_part.dest_offset == 300
    assert report.last_contiguous.dest_offset == 100
    assert report.last_contiguous_offset == 150
    assert report.discontinuity_len == 150


def test_report_fully_contiguous():
    report = order_parts(parts_from([(0, 10), (10, 10), (20, 10)])).report
    assert report.last_contiguous.dest_offset == 20
    assert report.last_contiguous_offset == 30
    assert report.discontinuity_len == 0


def test_contiguous_run_ends_at_first_gap():
    # The later (20,10),(30,10) pair is contiguous but not part of the prefix
    report = order_parts(parts_from([(0, 10), (20, 10), (30, 10)])).report
    assert report.last_contiguous.dest_offset == 0
    assert report.last_contiguous_offset == 10
    assert report.discontinuity_len == 20


def test_overlap_breaks_run():
    report = order_parts(parts_from([(0, 10), (5, 10)])).report
    assert report.last_contiguous.dest_offset == 0
    assert report.last_contiguous_offset == 10
    assert report.discontinuity_len == 0


def test_zero_or_one_part_has_no_report():
    assert order_parts([]) == ([], None)
    single = parts_from([(42, 7)])
    ordered = order_parts(single)
    assert ordered.parts == single
    assert ordered.report is None
    assert report_to_dict(ordered) is None
    assert "1 part(s)" in format_report(ordered)


def test_sort_is_stable_for_duplicate_offsets():
    parts = [
        PartDescriptor(10, 50, 5),
        PartDescriptor(20, 0, 50),
        PartDescriptor(30, 50, 5),
    ]
    ordered = order_parts(parts).parts
    assert ordered == [parts[1], parts[0], parts[2]]


def test_sort_is_a_permutation():
    rng = random.Random(1234)
    parts = [PartDescriptor(i, rng.randrange(0, 10000), rng.randrange(1, 100)) for i in range(200)]
    ordered = order_parts(parts).parts

    assert sorted(ordered) == sorted(parts)
    assert len(ordered) == len(parts)
    assert all(a.dest_offset <= b.dest_offset for a, b in zip(ordered, ordered[1:]))


def test_input_catalog_untouched():
    parts = parts_from([(300, 20), (0, 100)])
    before = list(parts)
    order_parts(parts)
    assert parts == before


def test_format_report():
    text = format_report(order_parts(parts_from([(0, 100), (100, 50), (300, 20)])))
    assert "Last contiguous offset: 150" in text
    assert "(Discontinuity: 150 bytes)" in text
    assert "out_offset: 300" in text


def test_report_to_dict():
    data = report_to_dict(order_parts(parts_from([(0, 100), (100, 50)])))
    assert data["last_contiguous_offset"] == 150
    assert data["discontinuity_len"] == 0
    assert data["first_part"] == {"source_offset": 1000, "dest_offset": 0, "size": 100}


def test_covered_end():
    assert covered_end([]) == 0
    assert covered_end(order_parts(parts_from([(0, 10), (5, 10)])).parts) == 15
    assert covered_end(order_parts(parts_from([(0, 10), (2, 3), (20, 5)])).parts) == 10
    assert covered_end(order_parts(parts_from([(0, 100), (100, 50), (300, 20)])).parts) == 150
