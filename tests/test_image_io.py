"""
Test input discovery and output naming
"""
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from imaging.errors import DirectoryListingError
from utils.image_io import derive_output_name, list_input_files, plan_outputs


class TestDeriveOutputName:

    def test_simple_names(self):
        assert derive_output_name("cat.png") == "cat-512.png"
        assert derive_output_name("portrait.jpg") == "portrait-512.jpg"

    def test_last_dot_is_extension(self):
        assert derive_output_name("a.b.jpg") == "a.b-512.jpg"

    def test_no_extension(self):
        assert derive_output_name("README") == "README-512"

    def test_uses_final_path_component(self):
        assert derive_output_name(Path("process-images/dog.webp")) == "dog-512.webp"

    def test_extension_case_kept(self):
        assert derive_output_name("IMG_0001.JPG") == "IMG_0001-512.JPG"

    def test_force_jpeg_extension(self):
        assert derive_output_name("cat.png", force_jpeg_extension=True) == "cat-512.jpg"
        assert derive_output_name("README", force_jpeg_extension=True) == "README-512.jpg"

    def test_target_size_in_suffix(self):
        assert derive_output_name("cat.png", target_size=768) == "cat-768.png"


class TestListInputFiles:

    def test_lists_files_sorted(self, tmp_path):
        for name in ["b.jpg", "a.png", "c.txt"]:
            (tmp_path / name).touch()
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "d.jpg").touch()

        files = list_input_files(tmp_path)

        assert [f.name for f in files] == ["a.png", "b.jpg", "c.txt"]

    def test_empty_directory(self, tmp_path):
        assert list_input_files(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryListingError, match="Error getting directory information.") as exc_info:
            list_input_files(tmp_path / "missing")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_path_is_a_file(self, tmp_path):
        path = tmp_path / "image.jpg"
        path.touch()

        with pytest.raises(DirectoryListingError):
            list_input_files(path)


class TestPlanOutputs:

    def test_pairs_sources_with_outputs(self, tmp_path):
        files = [tmp_path / "cat.png", tmp_path / "a.b.jpg"]
        out_dir = tmp_path / "processed-images"

        plan = plan_outputs(files, out_dir)

        assert plan == [
            (files[0], out_dir / "cat-512.png"),
            (files[1], out_dir / "a.b-512.jpg"),
        ]

    def test_collision_warns(self, tmp_path, caplog):
        files = [tmp_path / "cat.png", tmp_path / "cat.jpg"]

        with caplog.at_level(logging.WARNING):
            plan = plan_outputs(files, tmp_path / "out", force_jpeg_extension=True)

        assert len(plan) == 2
        assert plan[0][1] == plan[1][1]
        assert "overwrite each other" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__])
