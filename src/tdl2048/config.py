from dataclasses import dataclass, field
from typing import Dict, Optional

# Defaults for the command-line training run.
HYPERPARAMS = {
    "total_episodes": 1000,
    "block": 100,
    "seed": 42,
}

# Keys with a typed field in AgentConfig; anything else lands in `extra`.
_KNOWN_KEYS = {"name", "role", "seed", "alpha", "init", "load", "save", "n", "ply", "tile_values", "style"}
_PLAY_STYLES = ("random", "greedy1", "greedy2")


def parse_meta(text: str) -> Dict[str, str]:
    """
    Split whitespace-separated key=value tokens into a dict; later tokens win.
    A token without '=' maps to itself (e.g. "greedy1" -> {"greedy1": "greedy1"}).
    """
    meta = {}
    for pair in text.split():
        key, sep, value = pair.partition("=")
        meta[key] = value if sep else pair
    return meta


def _to_int(value: str) -> int:
    return int(float(value))


@dataclass
class AgentConfig:
    """Typed view of an agent's key=value arguments, validated once at construction."""
    name: str = "unknown"
    role: str = "unknown"
    seed: Optional[int] = None
    alpha: float = 0.0
    init: str = "standard"
    load: Optional[str] = None
    save: Optional[str] = None
    n: int = 1
    ply: int = 2
    tile_values: int = 16
    style: str = "random"
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_meta(cls, meta: Dict[str, str]) -> "AgentConfig":
        config = cls(
            name=meta.get("name", "unknown"),
            role=meta.get("role", "unknown"),
            seed=_to_int(meta["seed"]) if "seed" in meta else None,
            alpha=float(meta.get("alpha", 0.0)),
            init=meta.get("init") or "standard",
            load=meta.get("load"),
            save=meta.get("save"),
            n=_to_int(meta.get("n", 1)),
            ply=_to_int(meta.get("ply", 2)),
            tile_values=_to_int(meta.get("tile_values", 16)),
            style=meta.get("style") or _legacy_style(meta),
            extra={k: v for k, v in meta.items() if k not in _KNOWN_KEYS},
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.alpha < 0:
            raise ValueError(f"alpha must be non-negative, got {self.alpha}")
        if self.n < 1:
            raise ValueError(f"n must be at least 1, got {self.n}")
        if self.ply not in (1, 2):
            raise ValueError(f"ply must be 1 or 2, got {self.ply}")
        if self.tile_values < 2:
            raise ValueError(f"tile_values must be at least 2, got {self.tile_values}")
        if self.style not in _PLAY_STYLES:
            raise ValueError(f"unknown play style {self.style!r}, expected one of {_PLAY_STYLES}")


def _legacy_style(meta: Dict[str, str]) -> str:
    # Bare "random" / "greedy1" / "greedy2" tokens select the baseline style
    for style in _PLAY_STYLES:
        if style in meta:
            return style
    return "random"


def parse_agent_args(text: str = "") -> AgentConfig:
    return AgentConfig.from_meta(parse_meta(text))
