"""Tests for gifmoji.core.presets."""

import pytest
import yaml

from gifmoji.core.errors import ConfigError
from gifmoji.core.presets import BUILTIN_PRESETS, EffectPreset, PresetManager, load_config
from gifmoji.procedural import IntensifyParams, SpinParams, Style


@pytest.fixture
def manager(tmp_path):
    return PresetManager(user_presets_dir=tmp_path / "presets")


class TestBuiltinPresets:
    @pytest.mark.parametrize("name", sorted(BUILTIN_PRESETS))
    def test_every_builtin_is_a_valid_config(self, name, manager):
        config = manager.get(name).to_config()
        assert config.style.value == BUILTIN_PRESETS[name]["style"]

    def test_reverse_spin(self, manager):
        assert manager.get("spin_reverse").to_config().effect == SpinParams(reverse=True)

    def test_intensify_blur(self, manager):
        config = manager.get("intensify_blur").to_config()
        assert config.effect == IntensifyParams(intensity=4.0)
        assert config.blur_frames == 3

    def test_list_all_is_sorted(self, manager):
        names = manager.list_all()
        assert names == sorted(BUILTIN_PRESETS)


class TestUserPresets:
    def test_save_and_reload(self, manager, tmp_path):
        preset = EffectPreset(name="wild", style="intensify", intensity=9.0, frames=5, tags=["fun"])
        path = manager.save_preset(preset)
        assert path.name == "wild.yaml"

        reloaded = PresetManager(user_presets_dir=tmp_path / "presets")
        assert reloaded.get("wild").intensity == 9.0
        assert reloaded.is_user("wild")

    def test_user_overrides_builtin(self, manager, tmp_path):
        manager.save_preset(EffectPreset(name="spin", frames=3))
        reloaded = PresetManager(user_presets_dir=tmp_path / "presets")
        assert reloaded.get("spin").frames == 3

    def test_multi_preset_file(self, tmp_path):
        presets_dir = tmp_path / "presets"
        presets_dir.mkdir()
        (presets_dir / "pack.yaml").write_text(yaml.safe_dump({
            "presets": {
                "slow": {"style": "spin", "delay_ms": 200},
                "buzz": {"style": "intensify", "intensity": 0.5},
            }
        }))

        manager = PresetManager(user_presets_dir=presets_dir)
        assert manager.get("slow").delay_ms == 200
        assert manager.get("buzz").to_config().style is Style.INTENSIFY

    def test_bad_file_is_skipped(self, tmp_path):
        presets_dir = tmp_path / "presets"
        presets_dir.mkdir()
        (presets_dir / "broken.yaml").write_text("style: [unclosed")

        manager = PresetManager(user_presets_dir=presets_dir)
        assert "broken" not in manager.list_all()
        assert manager.get("spin") is not None

    def test_invalid_preset_not_saved(self, manager):
        with pytest.raises(ConfigError):
            manager.save_preset(EffectPreset(name="bad", frames=0))
        assert manager.get("bad") is None

    def test_delete(self, manager, tmp_path):
        manager.save_preset(EffectPreset(name="temp"))
        assert manager.delete_preset("temp")
        assert manager.get("temp") is None
        assert not (tmp_path / "presets" / "temp.yaml").exists()
        assert not manager.delete_preset("spin")

    def test_delete_from_multi_preset_file(self, tmp_path):
        presets_dir = tmp_path / "presets"
        presets_dir.mkdir()
        (presets_dir / "pack.yaml").write_text(yaml.safe_dump({
            "presets": {
                "slow": {"style": "spin", "delay_ms": 200},
                "buzz": {"style": "intensify", "intensity": 0.5},
            }
        }))

        assert PresetManager(user_presets_dir=presets_dir).delete_preset("slow")

        reloaded = PresetManager(user_presets_dir=presets_dir)
        assert not reloaded.is_user("slow")
        assert reloaded.get("buzz").intensity == 0.5


class TestLoadConfig:
    def test_camel_case_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("style: intensify\nnumFrames: 6\nframeDelayMs: 30\nintensity: 2.5\n")

        config = load_config(path)
        assert config.effect == IntensifyParams(intensity=2.5)
        assert config.num_frames == 6
        assert config.frame_delay_ms == 30

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- spin\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="Could not read"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("blurLength: 2\n")
        with pytest.raises(ConfigError, match="blur_length"):
            load_config(path)
