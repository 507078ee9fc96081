from __future__ import annotations

import os
import random
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from toggle.fractional import bucket, fractional


ints = st.integers(min_value=-(2**31), max_value=2**31 - 1)


@given(ints)
def test_fraction_one_is_always_on(i: int) -> None:
    on = fractional("com.toggle.on", 1.0)
    assert on.is_defined_at(i)
    assert on(i) is True


@given(ints)
def test_fraction_zero_is_always_off(i: int) -> None:
    off = fractional("com.toggle.off", 0.0)
    assert off.is_defined_at(i)
    assert off(i) is False


@given(st.text(min_size=1), st.floats(min_value=0.0, max_value=1.0), ints)
def test_fractional_is_deterministic(id: str, fraction: float, i: int) -> None:
    assert fractional(id, fraction)(i) is fractional(id, fraction)(i)
    b = bucket(id, i)
    assert 0.0 <= b < 1.0
    assert b == bucket(id, i)


@pytest.mark.parametrize("fraction", [0.001, 0.01, 0.1, 0.5, 0.9])
@pytest.mark.parametrize("size", [3000, 4500])
def test_fractional_converges_on_fraction(fraction: float, size: int) -> None:
    toggle = fractional(f"{fraction}", fraction)
    rng = random.Random(919191)
    trues = sum(1 for _ in range(size) if toggle(rng.randint(-(2**31), 2**31 - 1)))
    assert abs(trues - size * fraction) <= size * 0.05


def test_different_ids_bucket_independently() -> None:
    a = fractional("com.toggle.a", 0.5)
    b = fractional("com.toggle.b", 0.5)
    results = [(a(i), b(i)) for i in range(4000)]
    both = sum(1 for x, y in results if x and y)
    # Independent halves overlap on about a quarter of inputs.
    assert abs(both - 1000) <= 200


def test_bucket_stable_across_pythonhashseed_subprocesses() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    code = textwrap.dedent(
        """
        from toggle.fractional import bucket
        print(repr(bucket("com.toggle.seed_check", 12345)))
        """
    )

    def _run(seed: str) -> str:
        env = dict(os.environ)
        env["PYTHONHASHSEED"] = seed
        env["PYTHONPATH"] = str(repo_root) + os.pathsep + env.get("PYTHONPATH", "")
        return subprocess.check_output(
            [sys.executable, "-c", code],
            cwd=str(repo_root),
            env=env,
            text=True,
        ).strip()

    assert _run("1") == _run("2")
