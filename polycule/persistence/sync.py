"""URL fragment and storage persistence for the committed graph.

Startup picks the first source that decodes: the `#g=` fragment, then the
storage token, then the built-in default graph. Once that load has been
applied, every committed change rewrites both the fragment and the storage
token.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal, Protocol

from ..defaults import default_snapshot
from ..graph.store import GraphStore
from ..models import GraphSnapshot
from .codec import decode_graph, encode_graph

logger = logging.getLogger(__name__)

LoadSource = Literal["fragment", "storage", "default"]
DEFAULT_PREFIX = "#g="


class TokenStorage(Protocol):
    """Key/value storage for tokens (the local-storage analogue)."""

    def read(self) -> str | None:
        ...

    def write(self, token: str) -> None:
        ...


class LocationFragment:
    """The page's `location.hash`.

    `replace` mirrors `history.replaceState`: no history entry and no
    hash-change notification. `navigate` mirrors back/forward or a pasted
    link and notifies listeners.
    """

    def __init__(self, value: str = ""):
        self.value = value
        self.history: list[str] = [value]
        self._listeners: list[Callable[[str], None]] = []

    def on_change(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def replace(self, value: str) -> None:
        self.value = value
        self.history[-1] = value

    def navigate(self, value: str) -> None:
        self.value = value
        self.history.append(value)
        for listener in list(self._listeners):
            listener(value)


class MemoryStorage:
    def __init__(self, token: str | None = None):
        self.token = token

    def read(self) -> str | None:
        return self.token

    def write(self, token: str) -> None:
        self.token = token


class FileStorage:
    """Tokens kept in a JSON object file, one entry per key."""

    def __init__(self, path: Path, key: str = "polycule.graph"):
        self.path = path
        self.key = key

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def read(self) -> str | None:
        value = self._load().get(self.key)
        return value if isinstance(value, str) else None

    def write(self, token: str) -> None:
        data = self._load()
        data[self.key] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


@dataclass(frozen=True)
class LoadResult:
    source: LoadSource
    snapshot: GraphSnapshot


def token_from_fragment(fragment: str, prefix: str = DEFAULT_PREFIX) -> str | None:
    """Extract the token from a fragment, a bare `g=` value or a full URL."""
    text = fragment.strip()
    if "#" in text and not text.startswith("#"):
        text = text[text.index("#") :]
    if text.startswith(prefix):
        return text[len(prefix) :] or None
    return None


class PersistenceSync:
    """Keeps the fragment and storage in step with a `GraphStore`."""

    def __init__(
        self,
        store: GraphStore,
        fragment: LocationFragment,
        storage: TokenStorage,
        *,
        prefix: str = DEFAULT_PREFIX,
        default_factory: Callable[[], GraphSnapshot] = default_snapshot,
    ):
        self._store = store
        self._fragment = fragment
        self._storage = storage
        self._prefix = prefix
        self._default_factory = default_factory
        self.loaded = False
        store.subscribe(self._on_model_change)
        fragment.on_change(self._on_hash_change)

    def resolve(self) -> LoadResult:
        """Pick the startup snapshot without touching the store."""
        token = token_from_fragment(self._fragment.value, self._prefix)
        if token:
            snapshot = decode_graph(token)
            if snapshot is not None:
                return LoadResult("fragment", snapshot)
            logger.info("Fragment token did not decode, trying storage")

        stored = self._storage.read()
        if stored:
            snapshot = decode_graph(stored)
            if snapshot is not None:
                return LoadResult("storage", snapshot)
            logger.info("Stored token did not decode, using the default graph")

        return LoadResult("default", self._default_factory())

    def load(self) -> LoadResult:
        """Apply the startup priority chain to the store, then start persisting."""
        result = self.resolve()
        self._store.replace_graph(result.snapshot, operation=f"load-{result.source}")
        self.loaded = True
        self.persist(self._store.snapshot)
        return result

    def persist(self, snapshot: GraphSnapshot) -> str:
        """Write `snapshot` to fragment and storage.

        Returns the token, or "" when encoding or the storage write failed.
        """
        token = encode_graph(snapshot)
        if not token:
            return ""
        value = f"{self._prefix}{token}"
        if self._fragment.value != value:
            self._fragment.replace(value)
        try:
            self._storage.write(token)
        except OSError as exc:
            logger.warning("Could not write graph to storage: %s", exc)
            return ""
        return token

    def _on_model_change(self, operation: str, before: GraphSnapshot, after: GraphSnapshot) -> None:
        if not self.loaded:
            return
        self.persist(after)

    def _on_hash_change(self, value: str) -> None:
        self.loaded = False
        self.load()

    def share_link(self, base_url: str = "") -> str:
        """URL (or bare fragment) that reproduces the current graph."""
        token = encode_graph(self._store.snapshot)
        base = base_url.split("#", 1)[0]
        return f"{base}{self._prefix}{token}"

    def copy_link(self, clipboard: Callable[[str], object], base_url: str = "") -> bool:
        """Hand the share link to a clipboard writer. Failures are logged, not raised."""
        try:
            clipboard(self.share_link(base_url))
        except Exception:
            logger.exception("Failed to copy link")
            return False
        return True
