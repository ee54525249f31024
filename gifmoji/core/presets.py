"""
Effect Presets Library - Named animation settings
Built-in presets plus user presets stored as YAML files
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from ..procedural.base import EffectConfig

logger = logging.getLogger(__name__)


# ============================================================================
# Preset Data Structures
# ============================================================================

@dataclass
class EffectPreset:
    """A single effect preset configuration"""

    name: str
    description: str = ""

    style: str = "spin"
    frames: int = 8
    delay_ms: int = 50
    zoom: float = 1.0

    # Motion blur
    blur_frames: int = 0
    blur_amount: float = 0.5
    blur_length: float = 0.5

    # Style-specific
    reverse: bool = False
    intensity: float = 1.0

    # Tags for organization
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EffectPreset':
        """Create from dictionary"""
        # Filter to valid fields
        valid_fields = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        if 'name' not in filtered:
            raise ConfigError("Preset is missing a name")
        return cls(**filtered)

    def to_config(self) -> EffectConfig:
        """Validated EffectConfig for this preset"""
        return EffectConfig.from_dict({
            'style': self.style,
            'frame_delay_ms': self.delay_ms,
            'zoom': self.zoom,
            'num_frames': self.frames,
            'blur_frames': self.blur_frames,
            'blur_amount': self.blur_amount,
            'blur_length': self.blur_length,
            'reverse': self.reverse,
            'intensity': self.intensity,
        })


# ============================================================================
# Built-in Presets
# ============================================================================

BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    # ==================== SPIN ====================
    "spin": {
        "name": "spin",
        "description": "Plain clockwise spin",
        "style": "spin",
        "frames": 12,
        "delay_ms": 50,
        "tags": ["spin", "basic"],
    },

    "spin_blur": {
        "name": "spin_blur",
        "description": "Fast spin with a motion-blur trail",
        "style": "spin",
        "frames": 8,
        "delay_ms": 40,
        "blur_frames": 4,
        "blur_amount": 0.6,
        "blur_length": 0.8,
        "tags": ["spin", "blur"],
    },

    "spin_reverse": {
        "name": "spin_reverse",
        "description": "Counter-clockwise spin",
        "style": "spin",
        "frames": 12,
        "delay_ms": 50,
        "reverse": True,
        "tags": ["spin", "basic"],
    },

    "spin_zoomed": {
        "name": "spin_zoomed",
        "description": "Spin on a doubled canvas",
        "style": "spin",
        "frames": 16,
        "delay_ms": 40,
        "zoom": 2.0,
        "blur_frames": 2,
        "blur_amount": 0.4,
        "blur_length": 0.5,
        "tags": ["spin", "zoom"],
    },

    # ==================== INTENSIFY ====================
    "intensify": {
        "name": "intensify",
        "description": "Classic [intensifies] jitter",
        "style": "intensify",
        "frames": 8,
        "delay_ms": 30,
        "intensity": 2.0,
        "tags": ["intensify", "basic"],
    },

    "intensify_subtle": {
        "name": "intensify_subtle",
        "description": "Gentle vibration",
        "style": "intensify",
        "frames": 10,
        "delay_ms": 50,
        "intensity": 0.75,
        "tags": ["intensify", "subtle"],
    },

    "intensify_blur": {
        "name": "intensify_blur",
        "description": "Heavy shake with smeared motion",
        "style": "intensify",
        "frames": 8,
        "delay_ms": 30,
        "intensity": 4.0,
        "blur_frames": 3,
        "blur_amount": 0.5,
        "blur_length": 1.0,
        "tags": ["intensify", "blur"],
    },
}


# ============================================================================
# Preset Manager
# ============================================================================

class PresetManager:
    """
    Built-in presets plus the user's YAML presets.

    A user preset shadows the built-in of the same name. Each user preset
    remembers the file it came from so it can be deleted again.
    """

    def __init__(self, user_presets_dir: Optional[Path] = None):
        self.user_presets_dir = Path(user_presets_dir or Path.home() / '.gifmoji' / 'presets')

        self._builtin = {name: EffectPreset.from_dict(data) for name, data in BUILTIN_PRESETS.items()}
        self._user: Dict[str, EffectPreset] = {}
        self._files: Dict[str, Path] = {}

        if self.user_presets_dir.is_dir():
            for path in sorted(self.user_presets_dir.glob('*.yaml')):
                self._load_file(path)

    def _load_file(self, path: Path) -> None:
        """Read one YAML file holding either one preset or a `presets:` mapping"""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
            if not isinstance(data, dict):
                raise ConfigError("expected a mapping")

            entries = data['presets'] if 'presets' in data else {path.stem: data}
            loaded = {
                name: EffectPreset.from_dict({**entry, 'name': name})
                for name, entry in entries.items()
            }
        except (OSError, yaml.YAMLError, TypeError, AttributeError, ConfigError) as e:
            logger.warning("Could not load preset file %s: %s", path, e)
            return

        self._user.update(loaded)
        self._files.update(dict.fromkeys(loaded, path))

    def get(self, name: str) -> Optional[EffectPreset]:
        return self._user.get(name) or self._builtin.get(name)

    def is_user(self, name: str) -> bool:
        return name in self._user

    def list_all(self) -> List[str]:
        return sorted(self._builtin.keys() | self._user.keys())

    def save_preset(self, preset: EffectPreset) -> Path:
        """
        Write `preset` to `<name>.yaml` in the user directory.

        Raises:
            ConfigError: if the preset does not describe a valid EffectConfig
        """
        preset.to_config()

        self.user_presets_dir.mkdir(parents=True, exist_ok=True)
        path = self.user_presets_dir / f"{preset.name}.yaml"
        with open(path, 'w') as f:
            yaml.safe_dump(preset.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._user[preset.name] = preset
        self._files[preset.name] = path
        logger.info("Saved preset %s to %s", preset.name, path)
        return path

    def delete_preset(self, name: str) -> bool:
        """
        Remove a user preset and its file. Built-ins cannot be deleted.

        A file holding several presets is rewritten without the deleted one.
        """
        if name not in self._user:
            return False

        del self._user[name]
        path = self._files.pop(name)
        siblings = {n: p for n, p in self._user.items() if self._files.get(n) == path}
        if siblings:
            data = {'presets': {n: {k: v for k, v in p.to_dict().items() if k != 'name'}
                                for n, p in siblings.items()}}
            with open(path, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            path.unlink(missing_ok=True)
        return True


# ============================================================================
# Config Files
# ============================================================================

def load_config(path: str | Path) -> EffectConfig:
    """
    Load an EffectConfig from a YAML file.

    The file holds the flat configuration surface, for example::

        style: intensify
        numFrames: 8
        frameDelayMs: 30
        intensity: 2.5
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")

    return EffectConfig.from_dict(data)


# ============================================================================
# Global Instance & Convenience Functions
# ============================================================================

_manager: Optional[PresetManager] = None


def get_preset_manager() -> PresetManager:
    """Get or create global preset manager"""
    global _manager
    if _manager is None:
        _manager = PresetManager()
    return _manager


def get_preset(name: str) -> Optional[EffectPreset]:
    """Get a preset by name"""
    return get_preset_manager().get(name)
