"""
Change log for graph edits.

This module provides:
- Structured JSON Lines records of committed store operations
- Added/removed node and edge counts per operation
- A store listener that appends entries as edits happen
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import GraphSnapshot


@dataclass
class ChangeCounts:
    """How many nodes/edges an operation touched."""
    nodes: int = 0
    edges: int = 0


@dataclass
class ChangeEntry:
    """A single change log entry."""
    timestamp: str
    operation: str
    removed: ChangeCounts
    added: ChangeCounts
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp,
            "operation": self.operation,
            "removed": asdict(self.removed),
            "added": asdict(self.added),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChangeEntry":
        """Create from dictionary."""
        return cls(
            timestamp=data["timestamp"],
            operation=data["operation"],
            removed=ChangeCounts(**data.get("removed", {})),
            added=ChangeCounts(**data.get("added", {})),
            metadata=data.get("metadata", {}),
        )


def diff_counts(before: GraphSnapshot, after: GraphSnapshot) -> tuple[ChangeCounts, ChangeCounts]:
    """(removed, added) counts by node id and edge id."""
    before_nodes, after_nodes = set(before.node_ids()), set(after.node_ids())
    before_edges = {e.id for e in before.edges}
    after_edges = {e.id for e in after.edges}
    removed = ChangeCounts(nodes=len(before_nodes - after_nodes), edges=len(before_edges - after_edges))
    added = ChangeCounts(nodes=len(after_nodes - before_nodes), edges=len(after_edges - before_edges))
    return removed, added


def log_change(
    log_path: Path,
    operation: str,
    before: GraphSnapshot,
    after: GraphSnapshot,
    metadata: dict[str, Any] | None = None,
) -> ChangeEntry:
    """
    Append an operation to the change log.

    Args:
        log_path: Path to the JSON Lines log file
        operation: Store operation name (e.g., "rename-node", "dot-commit")
        before: Snapshot before the operation
        after: Snapshot after the operation
        metadata: Additional context (e.g., source file)

    Returns:
        The created entry
    """
    removed, added = diff_counts(before, after)
    entry = ChangeEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        operation=operation,
        removed=removed,
        added=added,
        metadata=metadata or {},
    )

    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict()) + "\n")

    return entry


def read_change_log(log_path: Path, last_n: int | None = None) -> list[ChangeEntry]:
    """
    Read entries from the change log.

    Args:
        log_path: Path to the JSON Lines log file
        last_n: If specified, return only the last N entries

    Returns:
        List of entries, oldest first
    """
    if not log_path.exists():
        return []

    entries = []
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                try:
                    entries.append(ChangeEntry.from_dict(json.loads(line)))
                except (json.JSONDecodeError, KeyError, TypeError):
                    continue  # Skip malformed lines

    if last_n is not None:
        return entries[-last_n:]
    return entries


def format_change_entry(entry: ChangeEntry) -> str:
    """Format an entry for human-readable display."""
    lines = [f"[{entry.timestamp}] {entry.operation}"]

    for title, counts in (("Removed", entry.removed), ("Added", entry.added)):
        parts = []
        if counts.nodes:
            parts.append(f"{counts.nodes} nodes")
        if counts.edges:
            parts.append(f"{counts.edges} edges")
        if parts:
            lines.append(f"  {title}: {', '.join(parts)}")

    for key, value in entry.metadata.items():
        lines.append(f"  {key}: {value}")

    return "\n".join(lines)


class ChangeLog:
    """Store listener that appends every committed operation."""

    def __init__(self, log_path: Path, metadata: dict[str, Any] | None = None):
        self.log_path = log_path
        self.metadata = metadata or {}

    def __call__(self, operation: str, before: GraphSnapshot, after: GraphSnapshot) -> None:
        log_change(self.log_path, operation, before, after, self.metadata)
