from __future__ import annotations

import logging
import threading

import pytest
from hypothesis import given, strategies as st

from toggle import MutableToggleMap


ints = st.integers(min_value=-(2**31), max_value=2**31 - 1)

ID = "com.toggle.hi"


def test_mutable_lifecycle_is_seen_by_existing_handles() -> None:
    m = MutableToggleMap()
    assert list(m) == []

    toggle = m(ID)
    for i in (-(2**31), -1, 0, 1, 12333, 2**31 - 1):
        assert not toggle.is_defined_at(i)

    m.put(ID, 1.0)
    for i in (-(2**31), -1, 0, 1, 12333, 2**31 - 1):
        assert toggle.is_defined_at(i)
        assert toggle(i)

    m.put(ID, 0.0)
    for i in (-(2**31), -1, 0, 1, 12333, 2**31 - 1):
        assert toggle.is_defined_at(i)
        assert not toggle(i)

    m.put(ID, 1.0)
    assert toggle(12333)
    m.remove(ID)
    assert not toggle.is_defined_at(12333)


@given(ints)
def test_mutable_put_full_and_empty(i: int) -> None:
    m = MutableToggleMap()
    m.put(ID, 1.0)
    assert m(ID)(i)
    m.put(ID, 0.0)
    assert not m(ID)(i)


def test_mutable_iterates_metadata() -> None:
    m = MutableToggleMap()
    m.put("com.toggle.a", 0.25)
    m.put("com.toggle.b", 1.0)
    mds = {md.id: md for md in m}
    assert mds["com.toggle.a"].fraction == 0.25
    assert mds["com.toggle.a"].source == "mutable"
    assert mds["com.toggle.b"].fraction == 1.0
    assert m.fraction("com.toggle.a") == 0.25
    assert m.fraction("com.toggle.nope") is None


def test_invalid_put_keeps_prior_definition() -> None:
    m = MutableToggleMap()
    m.put(ID, 1.0)
    m.put(ID, 1.1)
    m.put(ID, -0.5)
    m.put(ID, float("nan"))
    assert m.fraction(ID) == 1.0
    assert m(ID)(3)


def test_remove_unknown_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="toggle.mutable")
    m = MutableToggleMap()
    m.remove("com.toggle.never")
    assert list(m) == []
    assert caplog.records == []


def test_mutable_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="toggle.mutable")
    m = MutableToggleMap()

    def _last() -> logging.LogRecord:
        record = caplog.records[-1]
        caplog.clear()
        return record

    m.put(ID, 0.0)
    r = _last()
    assert r.levelno == logging.INFO
    assert r.getMessage() == f"{ID} set to fraction=0.0"

    m.remove(ID)
    r = _last()
    assert r.getMessage() == f"{ID} removed"

    m.put(ID, 0.5)
    assert _last().getMessage() == f"{ID} set to fraction=0.5"

    m.put(ID, 1.1)
    r = _last()
    assert r.levelno == logging.WARNING
    assert ID in r.getMessage()
    assert "ignoring invalid fraction=1.1" in r.getMessage()


def test_invalid_id_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="toggle.mutable")
    m = MutableToggleMap()
    m.put("not an id", 0.5)
    assert list(m) == []
    assert caplog.records[-1].levelno == logging.WARNING


def test_concurrent_writers_and_readers() -> None:
    m = MutableToggleMap()
    errors: list[BaseException] = []
    ids = [f"com.toggle.t{n}" for n in range(20)]

    def writer(offset: int) -> None:
        try:
            for round_ in range(200):
                for n, id in enumerate(ids):
                    if (n + offset + round_) % 3 == 0:
                        m.remove(id)
                    else:
                        m.put(id, ((n + round_) % 11) / 10.0)
        except BaseException as e:  # pragma: no cover
            errors.append(e)

    def reader() -> None:
        try:
            for _ in range(400):
                for md in m:
                    assert 0.0 <= md.fraction <= 1.0
                for id in ids:
                    m(id).apply_or_else(7, False)
        except BaseException as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=writer, args=(k,)) for k in range(3)]
    threads += [threading.Thread(target=reader) for _ in range(3)]
    logging.getLogger("toggle.mutable").disabled = True
    try:
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    finally:
        logging.getLogger("toggle.mutable").disabled = False

    assert errors == []
    for id in ids:
        m.put(id, 0.0)
    assert sorted(md.id for md in m) == sorted(ids)


def test_put_rejects_non_numeric_fraction(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="toggle.mutable")
    m = MutableToggleMap()
    m.put(ID, "0.5")  # type: ignore[arg-type]
    m.put(ID, True)  # type: ignore[arg-type]
    assert list(m) == []
    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.WARNING]
    assert "ignoring invalid fraction=0.5" in caplog.records[0].getMessage()
