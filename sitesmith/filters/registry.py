"""Named template filters, registered once and frozen before a build."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from sitesmith.errors import DuplicateNameError, UnknownFilterError

logger = logging.getLogger(__name__)

Filter = Callable[..., Any]


class FilterRegistry:
    """Mapping from filter name to a pure function.

    Registration happens at configuration time. ``freeze()`` is called
    before the build starts; after that the registry is shared read-only
    between worker threads and the template engine.
    """

    def __init__(self) -> None:
        self._filters: dict[str, Filter] = {}
        self._frozen = False

    def register(self, name: str, fn: Filter) -> None:
        if self._frozen:
            raise RuntimeError(f"Cannot register filter '{name}': registry is frozen")
        if name in self._filters:
            raise DuplicateNameError(name)
        self._filters[name] = fn
        logger.debug("registered filter %s", name)

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        return self.get(name)(*args, **kwargs)

    def get(self, name: str) -> Filter:
        try:
            return self._filters[name]
        except KeyError:
            raise UnknownFilterError(name) from None

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return sorted(self._filters)

    def as_mapping(self) -> Mapping[str, Filter]:
        return MappingProxyType(self._filters)

    def __contains__(self, name: object) -> bool:
        return name in self._filters

    def __len__(self) -> int:
        return len(self._filters)
