from __future__ import annotations

import random

import pytest

from shootcal.errors import LayoutError
from shootcal.paginate import PageGeometry, paginate


def _weeks(n):
    # pagination only looks at the count of rows; contents are passed through
    return [[None] * 7 for _ in range(n)]


def test_empty_input_gives_no_pages():
    assert paginate([], []) == []


def test_mismatched_heights_raise():
    with pytest.raises(LayoutError):
        paginate(_weeks(3), [60, 60])


def test_default_geometry_bands():
    g = PageGeometry()
    assert g.first_row_top(with_header=True) == 512
    assert g.first_row_top(with_header=False) == 572
    assert g.usable_bottom == 50
    assert g.column_width == pytest.approx(712 / 7)


def test_ten_minimum_rows_split_seven_and_three():
    pages = paginate(_weeks(10), [60.0] * 10)

    assert [p.row_indexes for p in pages] == [list(range(7)), [7, 8, 9]]
    assert pages[0].has_header and not pages[1].has_header
    assert pages[0].horizontal_lines == [512, 452, 392, 332, 272, 212, 152, 92]
    assert pages[1].horizontal_lines[0] == 572
    assert [p.number for p in pages] == [1, 2]


def test_header_can_be_turned_off():
    pages = paginate(_weeks(1), [60.0], header=False)
    assert not pages[0].has_header
    assert pages[0].rows[0].top == 572


def test_oversized_row_gets_its_own_page():
    pages = paginate(_weeks(3), [80.0, 600.0, 80.0])

    assert [p.row_indexes for p in pages] == [[0], [1], [2]]
    oversized = pages[1].rows[0]
    assert oversized.top == 572
    assert oversized.bottom == -28


def test_tiny_page_still_terminates():
    geometry = PageGeometry(height=150, header_height=50)
    pages = paginate(_weeks(4), [220.0] * 4, geometry)
    assert [p.row_indexes for p in pages] == [[0], [1], [2], [3]]


def test_cell_rects_tile_the_row():
    row = paginate(_weeks(1), [120.0])[0].rows[0]
    rects = [row.cell_rect(c) for c in range(7)]
    assert rects[0].min_x == 40
    assert rects[-1].max_x == pytest.approx(752)
    assert all(r.height == 120 and r.min_y == row.bottom for r in rects)
    assert row.rect.width == pytest.approx(712)


@pytest.mark.parametrize("seed", range(25))
def test_rows_in_order_once_and_fit_unless_first(seed):
    rng = random.Random(seed)
    count = rng.randint(1, 40)
    heights = [rng.choice([60.0, 80.0, 120.0, 170.0, 200.0, 220.0, 700.0]) for _ in range(count)]
    geometry = PageGeometry()

    pages = paginate(_weeks(count), heights, geometry)

    placed = [i for page in pages for i in page.row_indexes]
    assert placed == list(range(count))
    for page in pages:
        assert page.rows
        assert page.horizontal_lines == [page.rows[0].top] + [r.bottom for r in page.rows]
        for position, row in enumerate(page.rows):
            assert row.height == heights[row.index]
            if position > 0:
                assert row.bottom >= geometry.usable_bottom
