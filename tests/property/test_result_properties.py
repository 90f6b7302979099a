"""
Property-based tests for the Result type.

Checks the algebraic laws engine callers rely on when chaining results:
- Functor laws (map)
- Monad laws (and_then)
- Variant invariants
"""

from hypothesis import given
from hypothesis import strategies as st

from treesync.core.result import Err, Ok, Result


values = st.one_of(
    st.integers(),
    st.text(max_size=50),
    st.booleans(),
    st.floats(allow_nan=False, allow_infinity=False),
)
errors = st.text(min_size=1, max_size=50)
results = st.one_of(values.map(Ok), errors.map(Err))


def double(x):
    return x * 2


def describe(x):
    return f"<{x}>"


class TestFunctorLaws:
    """map(identity) is a no-op and map composes."""

    @given(results)
    def test_identity(self, result):
        assert result.map(lambda x: x) == result

    @given(results)
    def test_composition(self, result):
        assert result.map(double).map(describe) == result.map(lambda x: describe(double(x)))


class TestMonadLaws:
    """Ok is the unit of and_then, and and_then associates."""

    @given(values)
    def test_left_identity(self, value):
        def f(x):
            return Ok(describe(x))

        assert Ok(value).and_then(f) == f(value)

    @given(results)
    def test_right_identity(self, result):
        assert result.and_then(Ok) == result

    @given(results)
    def test_associativity(self, result):
        def f(x):
            return Ok(double(x))

        def g(x):
            return Err(describe(x)) if isinstance(x, bool) else Ok(describe(x))

        assert result.and_then(f).and_then(g) == result.and_then(lambda x: f(x).and_then(g))


class TestInvariants:
    """Exactly one variant holds and accessors agree with it."""

    @given(results)
    def test_exactly_one_variant(self, result):
        assert result.is_ok() != result.is_err()
        assert bool(result) == result.is_ok()

    @given(values, values)
    def test_unwrap_or(self, value, default):
        assert Ok(value).unwrap_or(default) == value
        assert Err("e").unwrap_or(default) == default

    @given(errors)
    def test_map_err_only_touches_err(self, error):
        assert Err(error).map_err(len) == Err(len(error))
        assert Ok(error).map_err(len) == Ok(error)

    @given(st.one_of(st.none(), values), errors)
    def test_from_optional(self, value, error):
        result = Result.from_optional(value, error)
        if value is None:
            assert result == Err(error)
        else:
            assert result == Ok(value)
