"""Shared fixtures for the ristream test suite."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest

from ristream.core.settings import load_settings
from ristream.ri import CommandCollector, FilterChain, InlineArchiveFilter, Renderer, TapFilter


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Iterator[None]:
    """Drop any Settings cached by a test that patched the environment."""
    yield
    load_settings.cache_clear()


@dataclass
class Pipeline:
    """``tap -> inlinearchive -> sink`` plus handles on every stage."""

    chain: FilterChain
    tap: TapFilter
    filter: InlineArchiveFilter
    sink: CommandCollector

    @property
    def head(self) -> Renderer:
        return self.chain.first_filter()


def make_pipeline(**filter_kwargs: object) -> Pipeline:
    sink = CommandCollector()
    chain = FilterChain(sink)
    flt = chain.add_filter(
        lambda services, nxt, _params: InlineArchiveFilter(
            services, nxt, **filter_kwargs  # type: ignore[arg-type]
        )
    )
    tap = chain.add_filter("tap")
    assert isinstance(flt, InlineArchiveFilter)
    assert isinstance(tap, TapFilter)
    return Pipeline(chain=chain, tap=tap, filter=flt, sink=sink)


@pytest.fixture  # type: ignore[misc]
def pipeline() -> Pipeline:
    """A fresh chain with default filter settings."""
    return make_pipeline()
