"""
Test pipeline configuration
"""
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from imaging.errors import ConfigError
from utils.config import PipelineConfig, build_config, load_config_file


class TestPipelineConfig:

    def test_defaults(self):
        cfg = PipelineConfig()

        assert cfg.input_dir == Path("process-images")
        assert cfg.output_dir == Path("processed-images")
        assert cfg.min_resolution == 512
        assert cfg.target_size == 512
        assert cfg.jpeg_quality == 80
        assert cfg.force_jpeg_extension is False
        assert cfg.num_workers == 0

    def test_string_paths_converted(self):
        cfg = PipelineConfig(input_dir="photos", output_dir="dataset")
        assert cfg.input_dir == Path("photos")
        assert cfg.output_dir == Path("dataset")

    @pytest.mark.parametrize("kwargs,message", [
        ({"min_resolution": 0}, "min_resolution must be positive"),
        ({"target_size": -1}, "target_size must be positive"),
        ({"jpeg_quality": 0}, "jpeg_quality must be between"),
        ({"jpeg_quality": 101}, "jpeg_quality must be between"),
        ({"num_workers": -2}, "num_workers must be >= 0"),
        ({"target_size": "512"}, "target_size must be an integer"),
        ({"num_workers": True}, "num_workers must be an integer"),
    ])
    def test_invalid_values(self, kwargs, message):
        with pytest.raises(ConfigError, match=message):
            PipelineConfig(**kwargs)

    @pytest.mark.parametrize("value", ["no", "false", 1, None])
    def test_force_jpeg_extension_must_be_bool(self, value):
        with pytest.raises(ConfigError, match="force_jpeg_extension must be true or false"):
            PipelineConfig(force_jpeg_extension=value)

    @pytest.mark.parametrize("name,value", [
        ("input_dir", None),
        ("output_dir", 42),
        ("input_dir", ""),
    ])
    def test_directories_must_be_paths(self, name, value):
        with pytest.raises(ConfigError, match=f"{name} must be a path"):
            PipelineConfig(**{name: value})

    def test_from_mapping_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown config keys: colour"):
            PipelineConfig.from_mapping({"colour": "red"})

    def test_merged_skips_none(self):
        cfg = PipelineConfig(target_size=256, min_resolution=256)
        merged = cfg.merged({"target_size": None, "jpeg_quality": 95})

        assert merged.target_size == 256
        assert merged.jpeg_quality == 95

    def test_merged_validates(self):
        with pytest.raises(ConfigError):
            PipelineConfig().merged({"jpeg_quality": 500})


class TestConfigFiles:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("target_size: 768\nmin_resolution: 768\nforce_jpeg_extension: true\n")

        assert load_config_file(path) == {
            "target_size": 768,
            "min_resolution": 768,
            "force_jpeg_extension": True,
        }

    def test_load_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"jpeg_quality": 90}))

        assert load_config_file(path) == {"jpeg_quality": 90}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")

        assert load_config_file(path) == {}

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("target_size = 512")

        with pytest.raises(ConfigError, match="Unsupported config format"):
            load_config_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 512\n- 512\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config_file(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Could not parse"):
            load_config_file(path)

    def test_build_config_precedence(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("input_dir: photos\njpeg_quality: 70\nnum_workers: 2\n")

        cfg = build_config(path, {"jpeg_quality": 95, "num_workers": None})

        assert cfg.input_dir == Path("photos")
        assert cfg.jpeg_quality == 95
        assert cfg.num_workers == 2

    def test_quoted_boolean_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text('force_jpeg_extension: "no"\n')

        with pytest.raises(ConfigError, match="force_jpeg_extension"):
            build_config(path)

    def test_empty_directory_value_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("input_dir:\n")

        with pytest.raises(ConfigError, match="input_dir must be a path"):
            build_config(path)

    def test_build_config_defaults(self):
        assert build_config() == PipelineConfig()

    def test_shipped_default_config(self):
        path = Path(__file__).parent.parent / "configs" / "default.yaml"
        assert build_config(path) == PipelineConfig()


if __name__ == "__main__":
    pytest.main([__file__])
