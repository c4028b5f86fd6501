from pathlib import Path

import pytest

from minty import FileSystemLoader, Template
from tests.infrastructure.file_utils import write_templates


@pytest.fixture
def engine() -> Template:
    """Engine without a loader and with default settings."""
    return Template()


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory with a small layout/page/partial set."""
    return write_templates(
        tmp_path / "templates",
        {
            "layouts/base.html": "<title>{% block title %}Site{% endblock %}</title>\n"
                                 "{% block body %}{% endblock %}",
            "partials/greeting.html": "Hello, {{ name }}!",
            "page.html": "{% extends \"layouts/base.html\" %}\n"
                         "{% block title %}Page{% endblock %}\n"
                         "{% block body %}{% include \"partials/greeting.html\" %}{% endblock %}",
        },
    )


@pytest.fixture
def fs_engine(template_dir: Path) -> Template:
    """Engine loading templates from template_dir."""
    return Template(FileSystemLoader(template_dir))
