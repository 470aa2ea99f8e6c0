"""
Materialized path value object.

A location's path is the ordered list of ids from the tree root down to the
location itself, stored as a dot-separated string ("root_id.child_id.self_id").
Depth is the number of segments, so a root location has depth 1.
"""

from dataclasses import dataclass

SEPARATOR = "."


@dataclass(frozen=True)
class MaterializedPath:
    """Immutable ancestry of a location, root first, ending with the location itself"""

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("Materialized path cannot be empty")
        for segment in self.segments:
            if not segment or SEPARATOR in segment:
                raise ValueError(f"Invalid path segment: {segment!r}")

    @classmethod
    def parse(cls, value: str) -> "MaterializedPath":
        return cls(tuple(value.split(SEPARATOR)))

    @classmethod
    def root(cls, location_id: str) -> "MaterializedPath":
        return cls((location_id,))

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def leaf(self) -> str:
        return self.segments[-1]

    @property
    def ancestor_ids(self) -> tuple[str, ...]:
        """Ids of every ancestor, root first, excluding the location itself"""
        return self.segments[:-1]

    @property
    def parent_id(self) -> str | None:
        return self.segments[-2] if len(self.segments) > 1 else None

    def child(self, location_id: str) -> "MaterializedPath":
        return MaterializedPath((*self.segments, location_id))

    def contains(self, location_id: str) -> bool:
        return location_id in self.segments

    def is_within(self, other: "MaterializedPath") -> bool:
        """True when this path equals `other` or lies in its subtree"""
        return self.segments[: other.depth] == other.segments

    def rebase(self, old_prefix: "MaterializedPath", new_prefix: "MaterializedPath") -> "MaterializedPath":
        """Replace `old_prefix` with `new_prefix`; used when a subtree is moved"""
        if not self.is_within(old_prefix):
            raise ValueError(f"{self} is not within {old_prefix}")
        return MaterializedPath(new_prefix.segments + self.segments[old_prefix.depth :])

    def subtree_like_pattern(self) -> str:
        """SQL LIKE pattern matching strict descendants of this path"""
        return f"{self}{SEPARATOR}%"
