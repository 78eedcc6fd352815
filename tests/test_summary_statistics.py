from domain.models import SizeSummaryRow
from domain.summary_statistics import most_popular_design, most_popular_size, summarize

SIZES = ("S", "M", "L")


def row(design_id, name, s=0, m=0, l=0):
    return SizeSummaryRow(design_id, name, {"S": s, "M": m, "L": l})


def test_most_popular_design_by_row_total():
    rows = [row("1", "Classic", s=1, m=1), row("2", "Stripe", l=5)]

    assert most_popular_design(rows) == "Stripe"


def test_most_popular_design_tie_goes_to_first_row():
    rows = [row("1", "Classic", m=3), row("2", "Stripe", l=3)]

    assert most_popular_design(rows) == "Classic"


def test_most_popular_size_tie_goes_to_earlier_size():
    rows = [row("1", "Classic", s=2, l=2)]

    assert most_popular_size(rows, SIZES) == "S"


def test_nothing_ordered_gives_empty_strings():
    rows = [row("1", "Classic"), row("2", "Stripe")]

    assert most_popular_design(rows) == ""
    assert most_popular_size(rows, SIZES) == ""
    assert most_popular_design([]) == ""


def test_summarize():
    rows = [row("1", "Classic", s=1, m=4), row("2", "Stripe", m=2, l=1)]

    stats = summarize(rows, SIZES)

    assert stats.size_totals == {"S": 1, "M": 6, "L": 1}
    assert stats.grand_total == 8
    assert stats.most_popular_design == "Classic"
    assert stats.most_popular_size == "M"
    assert stats.row_totals == [5, 3]
