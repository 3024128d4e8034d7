"""Configuration loaded from `polycule.toml`.

Example:

    [persistence]
    storage_path = ".polycule/storage.json"
    storage_key = "polycule.graph"
    fragment_prefix = "#g="

    [graph]
    node_id_policy = "letter"
    min_node_distance = 150

    [render]
    fallback_color = "#bdbdbd"
    default_edge_width = 3

    [log]
    change_log_path = ".polycule/changes.log"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .dot.colors import DEFAULT_FALLBACK, normalize_color_to_hex

CONFIG_FILENAME = "polycule.toml"
ID_POLICIES = ("numbered", "letter")


@dataclass(frozen=True)
class PersistenceConfig:
    storage_path: Path = Path(".polycule") / "storage.json"
    storage_key: str = "polycule.graph"
    fragment_prefix: str = "#g="


@dataclass(frozen=True)
class PolyculeConfig:
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    node_id_policy: str = "letter"
    min_node_distance: float = 150.0
    fallback_color: str = DEFAULT_FALLBACK
    default_edge_width: float = 3.0
    change_log_path: Path | None = Path(".polycule") / "changes.log"


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(section: dict[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    if value < 0:
        raise ValueError(f"{key} must not be negative")
    return float(value)


def _string(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} must be a non-empty string")
    return value.strip()


def find_config(start: Path) -> Path | None:
    """Look for polycule.toml in `start` and its parents."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None) -> PolyculeConfig:
    """Load configuration from TOML; relative paths resolve against the file.

    With no path the defaults are returned.
    """
    if path is None:
        return PolyculeConfig()

    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    base = path.parent

    persistence = _coerce_dict(data.get("persistence"))
    graph = _coerce_dict(data.get("graph"))
    render = _coerce_dict(data.get("render"))
    log = _coerce_dict(data.get("log"))

    defaults = PolyculeConfig()

    storage_path = Path(_string(persistence, "storage_path", str(defaults.persistence.storage_path)))
    prefix = _string(persistence, "fragment_prefix", defaults.persistence.fragment_prefix)
    if not prefix.startswith("#"):
        raise ValueError("fragment_prefix must start with '#'")

    policy = _string(graph, "node_id_policy", defaults.node_id_policy)
    if policy not in ID_POLICIES:
        raise ValueError(f"node_id_policy must be one of: {', '.join(ID_POLICIES)}")

    fallback = _string(render, "fallback_color", defaults.fallback_color)
    if normalize_color_to_hex(fallback, fallback=None) is None:
        raise ValueError("fallback_color must be a hex or hsl() color")

    change_log_path: Path | None = defaults.change_log_path
    if "change_log_path" in log:
        raw = log["change_log_path"]
        if raw in ("", False):
            change_log_path = None
        elif isinstance(raw, str):
            change_log_path = Path(raw)
        else:
            raise ValueError("change_log_path must be a string")

    return PolyculeConfig(
        persistence=PersistenceConfig(
            storage_path=storage_path if storage_path.is_absolute() else base / storage_path,
            storage_key=_string(persistence, "storage_key", defaults.persistence.storage_key),
            fragment_prefix=prefix,
        ),
        node_id_policy=policy,
        min_node_distance=_number(graph, "min_node_distance", defaults.min_node_distance),
        fallback_color=normalize_color_to_hex(fallback),
        default_edge_width=_number(render, "default_edge_width", defaults.default_edge_width),
        change_log_path=(
            change_log_path
            if change_log_path is None or change_log_path.is_absolute()
            else base / change_log_path
        ),
    )
