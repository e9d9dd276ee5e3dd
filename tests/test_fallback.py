import pytest

from tryto.fallback import FallbackChain, NoFallback, SingleFallback, as_fallback


def op():
    return "value"


def test_none_is_no_fallback():
    assert as_fallback(None) == NoFallback()


def test_callable_is_single():
    assert as_fallback(op) == SingleFallback(op)


def test_sequence_is_chain():
    assert as_fallback([op, op]) == FallbackChain((op, op))
    assert as_fallback((op,)) == FallbackChain((op,))


def test_empty_sequence_is_no_fallback():
    assert as_fallback([]) == NoFallback()


def test_variants_pass_through():
    single = SingleFallback(op)
    assert as_fallback(single) is single


@pytest.mark.parametrize("value", ["cache", 3, [op, "cache"]])
def test_rejects_non_callables(value):
    with pytest.raises(TypeError):
        as_fallback(value)
