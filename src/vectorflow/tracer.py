"""
Debug tracing for layout and rendering.

When debug mode is enabled, the artboard records what happened during a
render pass: which containers were arranged (and to what size), which were
normalized (and by how much), how each connector was routed, and how many
markup nodes were emitted.

This is primarily useful for:
1. Debugging layout issues (why did this box end up here?)
2. Seeing the order in which nested containers were resolved
3. Writing targeted tests (verifying a specific layout decision)

Usage:
    >>> board = Artboard(width="auto", height="auto")
    >>> svg = board.render(debug=True)
    >>> trace = board.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class LayoutEvent:
    """
    Record of a single layout or rendering decision.

    Attributes:
        stage: Kind of event ("arrange", "normalize", "route", "render").
        element: Label of the element the event concerns.
        data: Relevant values at the time of the event.
    """

    stage: str
    element: str
    data: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = []
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            parts.append(f"{key}={str_val}")
        return f"[{self.stage}] {self.element}: {', '.join(parts)}"


@dataclass
class LayoutTrace:
    """
    Complete trace of one render pass.

    Attributes:
        root: Label of the element the render started from.
        events: Events in the order they occurred.
    """

    root: str = ""
    events: List[LayoutEvent] = field(default_factory=list)

    def add_event(self, stage: str, element: str, data: Optional[Dict[str, Any]] = None) -> None:
        """
        Record an event.

        Args:
            stage: Kind of event (e.g. "arrange")
            element: Label of the element concerned
            data: Dictionary of relevant values, copied on insertion
        """
        self.events.append(LayoutEvent(stage, element, dict(data or {})))

    def get_events(self, stage: Optional[str] = None) -> List[LayoutEvent]:
        """All events, or only those of one stage."""
        if stage is None:
            return list(self.events)
        return [e for e in self.events if e.stage == stage]

    def get_events_for(self, element: str) -> List[LayoutEvent]:
        """Events about elements whose label contains `element`."""
        return [e for e in self.events if element in e.element]

    def route_fallbacks(self) -> List[LayoutEvent]:
        """Routing events that degraded to a direct segment."""
        return [e for e in self.get_events("route") if e.data.get("fallback")]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the root element, the number of events and a
        count of events per stage.
        """
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Root: {self.root}",
            f"Total events: {len(self.events)}",
            f"Route fallbacks: {len(self.route_fallbacks())}",
            "",
        ]

        stage_counts: Dict[str, int] = {}
        for event in self.events:
            stage_counts[event.stage] = stage_counts.get(event.stage, 0) + 1

        lines.append("Events by stage:")
        for stage, count in sorted(stage_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {stage}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Summary followed by every event in order."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]
        for event in self.events:
            lines.append(str(event))
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
