"""Tests for the gifmoji command line."""

import pytest
from PIL import Image

from conftest import BLUE, solid_pixels
from gifmoji import animate
from gifmoji.core.errors import ConfigError
from gifmoji.main import build_parser, main, resolve_config
from gifmoji.procedural import IntensifyParams, SpinParams, Style


@pytest.fixture
def image_path(tmp_path):
    pixels = solid_pixels(16, 16)
    pixels[8:] = BLUE
    path = tmp_path / "emoji.png"
    Image.fromarray(pixels, 'RGBA').save(path)
    return path


class TestResolveConfig:
    def test_defaults(self):
        config = resolve_config(build_parser().parse_args(["x.png"]))
        assert config.style is Style.SPIN
        assert config.num_frames == 8

    def test_flags(self):
        args = build_parser().parse_args([
            "x.png", "--style", "intensify", "-f", "5", "-d", "30", "-i", "2.5",
            "--blur-frames", "2", "--blur-amount", "0.3", "--blur-length", "0.9",
        ])
        config = resolve_config(args)
        assert config.effect == IntensifyParams(intensity=2.5)
        assert config.num_frames == 5
        assert config.frame_delay_ms == 30
        assert (config.blur_frames, config.blur_amount, config.blur_length) == (2, 0.3, 0.9)

    def test_flags_override_preset(self):
        args = build_parser().parse_args(["x.png", "--preset", "spin_blur", "-f", "3", "--reverse"])
        config = resolve_config(args)
        assert config.effect == SpinParams(reverse=True)
        assert config.num_frames == 3
        assert config.blur_frames == 4

    def test_config_file(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("style: intensify\nintensity: 4\n")
        config = resolve_config(build_parser().parse_args(["x.png", "--config", str(path)]))
        assert config.effect == IntensifyParams(intensity=4)

    def test_invalid_flag_value(self):
        with pytest.raises(ConfigError):
            resolve_config(build_parser().parse_args(["x.png", "--zoom", "0"]))


class TestMain:
    def test_writes_gif(self, image_path, tmp_path, capsys):
        output = tmp_path / "out.gif"
        assert main([str(image_path), "-o", str(output), "-f", "4"]) == 0

        with Image.open(output) as img:
            assert img.size == (16, 16)
        assert "Wrote" in capsys.readouterr().out

    def test_default_output_name(self, image_path):
        assert main([str(image_path), "--style", "intensify", "--seed", "2", "-f", "2"]) == 0
        assert (image_path.parent / "emoji_intensify.gif").exists()

    def test_frames_format(self, image_path, tmp_path):
        output = tmp_path / "frames"
        assert main([str(image_path), "--format", "frames", "-f", "3", "-o", str(output)]) == 0
        assert len(list(output.glob("frame_*.png"))) == 3

    def test_error_exit_code(self, image_path, capsys):
        assert main([str(image_path), "--blur-amount", "1.5"]) == 1
        assert "blur_amount" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.png")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_unknown_preset(self, image_path):
        assert main([str(image_path), "--preset", "nope"]) == 1

    def test_list_presets(self, capsys):
        assert main(["--list-presets"]) == 0
        out = capsys.readouterr().out
        assert "spin_blur" in out
        assert "intensify" in out

    def test_input_required(self):
        with pytest.raises(SystemExit):
            main([])


class TestAnimate:
    def test_animate_with_preset(self, image_path):
        path = animate(str(image_path), preset="intensify", seed=1.0)
        assert path.name == "emoji_intensify.gif"
        assert path.read_bytes()[:6] == b"GIF89a"

    def test_animate_unknown_preset(self, image_path):
        with pytest.raises(ConfigError):
            animate(str(image_path), preset="nope")
