"""
Tests for engine-level behaviour: parse cache, depth limit, configuration
and sharing one engine between threads.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

import minty
from minty import EngineConfig, FileSystemLoader, Template
from tests.infrastructure import make_engine, write


class TestParseCache:

    def test_tree_reused(self):
        engine = Template()
        assert engine.parse("{{ a }}") is engine.parse("{{ a }}")

    def test_cache_bounded(self):
        engine = Template(config=EngineConfig(cache_size=2))
        first = engine.parse("one")
        engine.parse("two")
        engine.parse("three")
        assert engine.parse("one") is not first

    def test_recently_used_kept(self):
        engine = Template(config=EngineConfig(cache_size=2))
        first = engine.parse("one")
        engine.parse("two")
        engine.parse("one")
        engine.parse("three")
        assert engine.parse("one") is first

    def test_cache_disabled(self):
        engine = Template(config=EngineConfig(cache_size=0))
        assert engine.parse("x") is not engine.parse("x")

    def test_clear_cache(self):
        engine = Template()
        tree = engine.parse("x")
        engine.clear_cache()
        assert engine.parse("x") is not tree

    def test_cached_tree_renders_with_new_data(self):
        engine = Template()
        assert engine.render("{{ n }}", {"n": 1}) == "1"
        assert engine.render("{{ n }}", {"n": 2}) == "2"


class TestDepthLimit:

    def test_limit_from_config(self):
        engine = make_engine({"a": "a{% include 'a' %}"}, config=EngineConfig(max_depth=3))
        result = engine.render("{% include 'a' %}", {})
        assert result == "aaa{% include &quot;a&quot; !!maximum template depth exceeded %}"

    def test_siblings_do_not_add_depth(self):
        """Depth counts nesting, not the number of includes."""
        engine = make_engine({"p": "p"}, config=EngineConfig(max_depth=1))
        assert engine.render("{% include 'p' %}{% include 'p' %}{% include 'p' %}", {}) == "ppp"


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert config.max_depth == 64
        assert config.cache_size == 256
        assert config.template_dir is None
        assert config.encoding == "utf-8"

    @pytest.mark.parametrize("kwargs", [
        {"max_depth": 0},
        {"max_depth": "10"},
        {"max_depth": True},
        {"cache_size": -1},
        {"template_dir": 5},
        {"encoding": ""},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(minty.ConfigError):
            EngineConfig(**kwargs)

    def test_unknown_keys(self):
        with pytest.raises(minty.ConfigError, match="Unknown config keys: colour, size"):
            EngineConfig.from_dict({"size": 1, "colour": "red"})

    def test_from_config_builds_loader(self, template_dir: Path):
        engine = Template.from_config(EngineConfig(template_dir=str(template_dir)))
        assert isinstance(engine.loader, FileSystemLoader)
        assert engine.render_file("partials/greeting.html", {"name": "Bo"}) == "Hello, Bo!"

    def test_from_config_keeps_explicit_loader(self, template_dir: Path):
        loader = lambda name: "custom"
        engine = Template.from_config(EngineConfig(template_dir=str(template_dir)), loader=loader)
        assert engine.loader is loader

    def test_from_config_without_template_dir(self):
        engine = Template.from_config(EngineConfig(), filters={"x": lambda v: "x"})
        assert engine.loader is None
        assert engine.render("{{ 1|x }}", {}) == "x"


class TestThreadSafety:

    def test_shared_engine(self, tmp_path: Path):
        write(tmp_path / "item.html", "<{{ n }}>")
        engine = Template(FileSystemLoader(tmp_path))
        source = "{% for i in items %}{% include 'item.html' %}{% endfor %}"

        def job(n):
            return engine.render(source, {"items": list(range(3)), "n": n})

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(job, range(40)))
        assert results == [f"<{n}><{n}><{n}>" for n in range(40)]


class TestPackage:

    def test_version_string(self):
        assert isinstance(minty.__version__, str)
        assert minty.__version__

    def test_public_names(self):
        for name in minty.__all__:
            assert hasattr(minty, name)
