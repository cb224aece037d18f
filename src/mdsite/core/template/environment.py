"""Variable environment shared by a page render, with scoped overlays for loop keys"""

from contextlib import contextmanager
from typing import Iterator, Mapping


class Variables:
    """String-to-string mapping with a stack of overlay frames.

    Global keys (site.*, page.*, post.*, month_NN) live in the base mapping.
    Loop iteration keys are written to the innermost frame, which is discarded
    when its scope exits, so an outer value of the same key reappears.
    """

    def __init__(self, initial: Mapping[str, str] = None):
        self._base: dict[str, str] = dict(initial or {})
        self._frames: list[dict[str, str]] = []

    def __getitem__(self, key: str) -> str:
        for frame in reversed(self._frames):
            if key in frame:
                return frame[key]
        return self._base[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._base[key] = value

    def __contains__(self, key: object) -> bool:
        return any(key in f for f in self._frames) or key in self._base

    def get(self, key: str, default: str | None = None) -> str | None:
        try:
            return self[key]
        except KeyError:
            return default

    def update(self, values: Mapping[str, str]) -> None:
        self._base.update(values)

    @property
    def depth(self) -> int:
        """Number of open overlay frames."""
        return len(self._frames)

    @contextmanager
    def scope(self) -> Iterator[dict[str, str]]:
        """Push an overlay frame for the duration of the block; always popped on exit."""
        frame: dict[str, str] = {}
        self._frames.append(frame)
        try:
            yield frame
        finally:
            self._frames.pop()

    def as_dict(self) -> dict[str, str]:
        """Flattened view with overlays applied."""
        merged = dict(self._base)
        for frame in self._frames:
            merged.update(frame)
        return merged
