"""Input sources."""

from openlib_spine.sources.lines import LineSource

__all__ = ["LineSource"]
