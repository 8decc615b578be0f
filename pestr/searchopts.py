"""Compact search option syntax: "pe_radius=0.3,thread_radius=0.5,conserve_nodes"."""
import re

from pestr.errors import InvalidSearchOption
from pestr.models import SearchOptions

_FLOAT_VALUE = r"(?P<value>[0-9]*\.?[0-9]+)"
_CONSERVE_NODES = "conserve_nodes"


def _float_option(name: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(name)}={_FLOAT_VALUE}$")


_FLOAT_OPTIONS = {
    "pe_radius": _float_option("pe_radius"),
    "thread_radius": _float_option("thread_radius"),
}


def parse_search_options(text: str, defaults: SearchOptions | None = None) -> SearchOptions:
    """
    Parse comma-separated search tokens on top of `defaults` (built-in defaults if None).
    Accepted tokens: conserve_nodes, pe_radius=<number>, thread_radius=<number>.
    Raises InvalidSearchOption on any other token, including an empty one.
    """
    values = (defaults or SearchOptions()).model_dump()
    for token in text.split(","):
        token = token.strip()
        if token == _CONSERVE_NODES:
            values["conserve_nodes"] = True
            continue
        for key, pattern in _FLOAT_OPTIONS.items():
            m = pattern.match(token)
            if m:
                values[key] = float(m.group("value"))
                break
        else:
            raise InvalidSearchOption(f"unknown search option: {token}")
    return SearchOptions(**values)
