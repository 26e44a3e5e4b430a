"""Configuration Presets for Tap Sessions.

Pre-defined session configurations for different tapping styles.
Supports both static presets and user presets loaded from JSON.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for a tap session."""

    initial_bpm: float = 125.0
    nudge_step: float = 0.5
    drag_sensitivity: float = 0.0025


# Pre-defined static configuration presets
PRESETS: dict[str, SessionConfig] = {
    "default": SessionConfig(),
    # Small steps for dialing in a tempo by ear
    "fine": SessionConfig(nudge_step=0.1, drag_sensitivity=0.001),
    # Big jumps when hunting for the right range
    "coarse": SessionConfig(nudge_step=5.0, drag_sensitivity=0.01),
    # Typical starting point for slow material
    "ballad": SessionConfig(initial_bpm=70.0, nudge_step=0.5),
    # Typical starting point for dance music
    "club": SessionConfig(initial_bpm=128.0, nudge_step=0.5),
}

_USER_PRESETS: dict[str, SessionConfig] = {}


def get_preset(name: str) -> SessionConfig:
    """Get a session preset by name.

    Args:
        name: Preset name (user presets shadow static ones).

    Returns:
        SessionConfig with the preset parameters.

    Raises:
        KeyError: If preset name is not found.
    """
    if name in _USER_PRESETS:
        return _USER_PRESETS[name]

    if name in PRESETS:
        return PRESETS[name]

    available = ", ".join(list(PRESETS) + list(_USER_PRESETS))
    raise KeyError(f"Unknown preset '{name}'. Available: {available}")


def list_presets() -> dict[str, dict[str, Any]]:
    """List all available presets with their parameters."""
    result = {name: {**asdict(config), "type": "static"} for name, config in PRESETS.items()}
    for name, config in _USER_PRESETS.items():
        result[name] = {**asdict(config), "type": "user"}
    return result


def register_user_preset(name: str, config: SessionConfig) -> None:
    _USER_PRESETS[name] = config


def clear_user_presets() -> int:
    """Clear all user presets.

    Returns:
        Number of presets cleared.
    """
    count = len(_USER_PRESETS)
    _USER_PRESETS.clear()
    return count


def save_user_presets(path: Path | str) -> int:
    """Save user presets to a JSON file.

    Returns:
        Number of presets saved.
    """
    path = Path(path)
    data = {name: asdict(config) for name, config in _USER_PRESETS.items()}

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    return len(data)


def load_user_presets(path: Path | str) -> int:
    """Load user presets from a JSON file.

    Missing keys fall back to the ``SessionConfig`` defaults.

    Returns:
        Number of presets loaded (0 if the file does not exist).
    """
    path = Path(path)
    if not path.exists():
        return 0

    with open(path) as f:
        data = json.load(f)

    defaults = SessionConfig()
    count = 0
    for name, config_data in data.items():
        _USER_PRESETS[name] = SessionConfig(
            initial_bpm=float(config_data.get("initial_bpm", defaults.initial_bpm)),
            nudge_step=float(config_data.get("nudge_step", defaults.nudge_step)),
            drag_sensitivity=float(
                config_data.get("drag_sensitivity", defaults.drag_sensitivity)
            ),
        )
        count += 1

    return count
