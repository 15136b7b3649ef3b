import pytest

from umami_export.common.paging import extract_rows, paginate


def _pages_by_offset(sizes, limit):
    pages = {i * limit: [{"name": f"/p{i}-{j}", "visitors": 1} for j in range(n)] for i, n in enumerate(sizes)}
    calls = []

    def fetch(offset):
        calls.append(offset)
        return pages[offset]

    return fetch, calls


def test_stops_on_empty_page_only():
    fetch, calls = _pages_by_offset([500, 500, 3, 0], limit=500)
    batches = list(paginate(fetch, limit=500))

    assert [len(b) for b in batches] == [500, 500, 3]
    assert sum(len(b) for b in batches) == 1003
    assert calls == [0, 500, 1000, 1500]


def test_short_page_does_not_end_walk():
    fetch, calls = _pages_by_offset([2, 1, 2, 0], limit=2)
    batches = list(paginate(fetch, limit=2))
    assert [len(b) for b in batches] == [2, 1, 2]
    assert calls == [0, 2, 4, 6]


def test_first_page_empty_yields_nothing():
    fetch, calls = _pages_by_offset([0], limit=10)
    assert list(paginate(fetch, limit=10)) == []
    assert calls == [0]


def test_is_lazy():
    fetch, calls = _pages_by_offset([1, 1, 0], limit=1)
    it = paginate(fetch, limit=1)
    assert calls == []
    next(it)
    assert calls == [0]


def test_fetch_error_propagates():
    def fetch(offset):
        if offset:
            raise RuntimeError("boom")
        return [{"name": "/a"}]

    it = paginate(fetch, limit=1)
    next(it)
    with pytest.raises(RuntimeError):
        next(it)


@pytest.mark.parametrize(
    "payload,expected",
    [
        ([{"name": "/a"}], [{"name": "/a"}]),
        ([], []),
        ({"data": [{"name": "/b"}]}, [{"name": "/b"}]),
        ({"rows": [{"name": "/c"}]}, [{"name": "/c"}]),
        ({"data": [1], "rows": [2]}, [1]),
        ({"data": "nope", "rows": [2]}, [2]),
    ],
)
def test_extract_rows_known_shapes(payload, expected):
    assert extract_rows(payload) == expected


@pytest.mark.parametrize("payload", [None, {}, {"data": None}, "rows", 3, {"items": []}])
def test_extract_rows_unknown_shape(payload):
    assert extract_rows(payload) is None
