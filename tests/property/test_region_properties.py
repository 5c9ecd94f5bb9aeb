"""Property tests for region label reduction and the set-once label cell."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from reliable_proxy.models.geo import GeoResult
from reliable_proxy.region.state import RegionState

# --- Strategies ---

parts = st.one_of(
    st.none(),
    st.just(""),
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz ABCDEFGHIJKLMNOPQRSTUVWXYZ-", min_size=1, max_size=15),
)
labels = st.text(min_size=0, max_size=30)


@settings(max_examples=200)
@given(city=parts, region=parts, country_name=parts, country_code=parts)
def test_label_joins_non_empty_parts_in_order(
    city: str | None,
    region: str | None,
    country_name: str | None,
    country_code: str | None,
) -> None:
    result = GeoResult(
        city=city, region=region, country_name=country_name, country_code=country_code
    )

    expected = [p for p in (city, region) if p]
    if country_name:
        expected.append(country_name)
    elif country_code:
        expected.append(country_code)
    assert result.label() == ", ".join(expected)


@settings(max_examples=100)
@given(writes=st.lists(labels, min_size=1, max_size=5))
def test_first_write_wins(writes: list[str]) -> None:
    state = RegionState()

    results = [state.set(label) for label in writes]

    assert state.get() == writes[0]
    assert results == [True] + [False] * (len(writes) - 1)
