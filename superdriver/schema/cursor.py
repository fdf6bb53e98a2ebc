"""
Cursor - location of an annotated value inside a data shape.

A cursor is an ordered sequence of segments. Each segment is either a
dotted property path ("a.b.c") resolvable at the current nesting level,
or an array boundary meaning "resolve the rest once per element of the
value found here".

The legacy string form encodes the boundary as the empty string:

    ["companies", "properties.name.value"]
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union


@dataclass(frozen=True)
class PropertyPath:
    """Dotted property path. The empty path denotes the value itself."""
    path: str

    def __str__(self) -> str:
        return self.path


class ArrayBoundary:
    """Array element boundary segment (singleton)"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ARRAY_BOUNDARY"

    def __str__(self) -> str:
        return ""


ARRAY_BOUNDARY = ArrayBoundary()

Segment = Union[PropertyPath, ArrayBoundary]


@dataclass(frozen=True)
class Cursor:
    """Immutable sequence of cursor segments"""
    segments: Tuple[Segment, ...] = ()

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __getitem__(self, index):
        return self.segments[index]

    @property
    def head(self) -> Segment:
        return self.segments[0]

    @property
    def rest(self) -> "Cursor":
        return Cursor(self.segments[1:])

    @property
    def last(self) -> Segment:
        return self.segments[-1]

    def push(self, segment: Segment) -> "Cursor":
        """Return a new cursor with the segment appended"""
        return Cursor(self.segments + (segment,))

    def descend(self, key: str) -> "Cursor":
        """
        Return the cursor of property `key` of the value this cursor points to.

        The key is merged into the last segment: an array boundary is replaced
        by the key, a property path is extended with ".key", and an empty
        cursor starts with the key as its first segment.
        """
        if not self.segments:
            return Cursor((PropertyPath(key),))

        last = self.last
        if last is ARRAY_BOUNDARY:
            merged = PropertyPath(key)
        elif last.path:
            merged = PropertyPath(f"{last.path}.{key}")
        else:
            merged = PropertyPath(key)
        return Cursor(self.segments[:-1] + (merged,))

    def to_strings(self) -> List[str]:
        """Render the legacy form, array boundaries as empty strings"""
        return [str(segment) for segment in self.segments]

    @classmethod
    def from_strings(cls, segments: Iterable[str]) -> "Cursor":
        """Parse the legacy form. Empty strings become array boundaries."""
        return cls(tuple(
            ARRAY_BOUNDARY if segment == "" else PropertyPath(segment)
            for segment in segments
        ))

    def __repr__(self) -> str:
        return f"Cursor({self.to_strings()!r})"
