"""Tests for the compact search option syntax."""
import pytest

from pestr.errors import InvalidSearchOption
from pestr.models import SearchOptions
from pestr.searchopts import parse_search_options


def test_parse_all_tokens():
    opts = parse_search_options("pe_radius=0.3,thread_radius=1,conserve_nodes")
    assert opts == SearchOptions(conserve_nodes=True, pe_radius=0.3, thread_radius=1.0)


def test_unset_keys_keep_builtin_defaults():
    opts = parse_search_options("thread_radius=.75")
    assert opts.thread_radius == 0.75
    assert opts.pe_radius == 0.25
    assert opts.conserve_nodes is False


def test_unset_keys_keep_given_defaults():
    defaults = SearchOptions(conserve_nodes=True, pe_radius=0.1, thread_radius=0.2)
    opts = parse_search_options("pe_radius=0.4", defaults=defaults)
    assert opts == SearchOptions(conserve_nodes=True, pe_radius=0.4, thread_radius=0.2)


def test_later_token_wins():
    assert parse_search_options("pe_radius=0.1,pe_radius=0.2").pe_radius == 0.2


@pytest.mark.parametrize(
    "text",
    [
        "bogus",
        "pe_radius=",
        "pe_radius=-0.5",
        "pe_radius=abc",
        "thread_radius=1e-3",
        "conserve_nodes=true",
        "",
        "pe_radius=0.3,",
    ],
)
def test_bad_tokens(text):
    with pytest.raises(InvalidSearchOption, match="unknown search option"):
        parse_search_options(text)
