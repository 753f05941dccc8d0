"""Tests for configuration loading and merging."""

import pytest

from ts2mermaid.core.config import (
    Configuration,
    Options,
    apply_overrides,
    load_options,
    merge_configurations,
    parse_options,
)
from ts2mermaid.core.exceptions import ConfigurationError


class TestParseOptions:
    def test_none_is_default_configuration(self):
        options = parse_options(None)
        assert isinstance(options, Configuration)
        assert options.renderer == "mmdc"
        assert options.include is None

    def test_single_configuration_camel_case(self):
        options = parse_options({"pathToScan": "lib", "hideExtends": True, "include": ["^Api"]})
        assert isinstance(options, Configuration)
        assert options.path_to_scan == "lib"
        assert options.hide_extends is True
        assert [p.pattern for p in options.include_patterns] == ["^Api"]

    def test_single_configuration_snake_case(self):
        options = parse_options({"path_to_save": "out", "hide_types": True})
        assert options.path_to_save == "out"
        assert options.hide_types is True

    def test_list(self):
        options = parse_options([{"name": "a"}, {"name": "b"}])
        assert isinstance(options, Options)
        assert [c.name for c in options.configurations] == ["a", "b"]

    def test_global_and_list(self):
        options = parse_options({"global": {"pathToScan": "src/app"}, "list": [{"name": "models"}]})
        assert isinstance(options, Options)
        assert options.global_configuration.path_to_scan == "src/app"
        assert options.configurations[0].name == "models"

    def test_invalid_regex(self):
        with pytest.raises(ConfigurationError):
            parse_options({"include": ["(unclosed"]})

    def test_unknown_renderer(self):
        with pytest.raises(ConfigurationError):
            parse_options({"renderer": "graphviz"})

    def test_wrong_shape(self):
        with pytest.raises(ConfigurationError):
            parse_options(42)


class TestMerge:
    def test_override_wins_field_by_field(self):
        base = Configuration(path_to_scan="src", hide_types=True, include=["^A"])
        override = Configuration(include=["^B"], hide_extends=True)

        merged = merge_configurations(base, override)
        assert merged.path_to_scan == "src"
        assert merged.hide_types is True
        assert merged.hide_extends is True
        assert merged.include == ["^B"]

    def test_unset_fields_do_not_override(self):
        base = Configuration(hide_types=True)
        merged = merge_configurations(base, Configuration(name="x"))
        assert merged.hide_types is True
        assert merged.name == "x"

    def test_no_base(self):
        override = Configuration(name="only")
        assert merge_configurations(None, override) is override

    def test_apply_overrides_to_global(self):
        options = parse_options({"global": {"pathToScan": "src"}, "list": [{"name": "a"}]})
        updated = apply_overrides(options, Configuration(renderer="none"))
        assert updated.global_configuration.renderer == "none"
        assert updated.global_configuration.path_to_scan == "src"
        assert updated.configurations[0].name == "a"

    def test_apply_overrides_to_single(self):
        updated = apply_overrides(Configuration(name="a"), Configuration(hide_types=True))
        assert updated.name == "a"
        assert updated.hide_types is True


class TestLoadOptions:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "ts2mermaid.yaml"
        path.write_text(
            "global:\n"
            "  pathToScan: src\n"
            "list:\n"
            "  - name: models\n"
            "    include: ['^Model']\n"
            "  - name: api\n"
            "    hideDependencies: true\n"
        )
        options = load_options(str(path))
        assert isinstance(options, Options)
        assert [c.name for c in options.configurations] == ["models", "api"]
        assert options.configurations[1].hide_dependencies is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert isinstance(load_options(str(path)), Configuration)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("list: [unterminated\n")
        with pytest.raises(ConfigurationError):
            load_options(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_options(str(tmp_path / "missing.yaml"))
