"""
Tests for configuration loading and the exclude filter.
"""

import pytest
from pathlib import Path

from hsmodules.shared.errors import ConfigError
from hsmodules.utils.config import CONFIG_FILE_NAME, DEFAULT_HYDRATE_PREFIX, Config, load_config


class TestLoadConfig:
    """Reading .hsmodules.yml"""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config == Config()
        assert config.hydrate_prefix == DEFAULT_HYDRATE_PREFIX

    def test_empty_file_gives_defaults(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("")
        assert load_config(tmp_path) == Config()

    def test_values(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "hydrate_prefix: Imp\nexcludes:\n  - '^vendor/'\nreveal_focused: false\n"
        )
        config = load_config(tmp_path)
        assert config.hydrate_prefix == "Imp"
        assert config.excludes == ["^vendor/"]
        assert config.reveal_focused is False

    def test_single_exclude_string(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("excludes: '^gen/'\n")
        assert load_config(tmp_path).excludes == ["^gen/"]

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, tmp_path / "nope.yml")

    @pytest.mark.parametrize("content", [
        "hydrate_prefix: q\n",
        "hydrate_prefix: 3\n",
        "excludes: [1, 2]\n",
        "excludes: ['(']\n",
        "reveal_focused: sometimes\n",
        "colour: blue\n",
        "- a list\n",
        "hydrate_prefix: [unclosed\n",
    ])
    def test_invalid(self, tmp_path, content):
        (tmp_path / CONFIG_FILE_NAME).write_text(content)
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestExcludes:
    """Exclude patterns are matched against workspace-relative paths"""

    def test_default_excludes_build_directories(self):
        config = Config()
        assert config.is_excluded(Path("dist-newstyle/build/X.hs"))
        assert config.is_excluded(Path("pkg/.stack-work/Y.hs"))
        assert not config.is_excluded(Path("src/Distribution/Z.hs"))

    def test_no_excludes(self):
        config = Config(excludes=[])
        assert config.excludes_regexp is None
        assert not config.is_excluded(Path("dist-newstyle/X.hs"))

    def test_several_patterns(self):
        config = Config(excludes=["^a/", "^b/"])
        assert config.is_excluded(Path("a/X.hs"))
        assert config.is_excluded(Path("b/X.hs"))
        assert not config.is_excluded(Path("c/a/X.hs"))


if __name__ == "__main__":
    pytest.main([__file__])
