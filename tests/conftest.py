from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write, write_component


@pytest.fixture
def components(tmp_path: Path) -> Path:
    """
    Каталог с набором компонентов, общих для тестов render/meta.

    page.liquid: точка входа (файл верхнего уровня).
    """
    write(tmp_path / "page.liquid", "")
    write_component(tmp_path, "basic", "<p>basic</p>\n")
    write_component(tmp_path, "greeting", "Hello {{ name }}!\n")
    write_component(
        tmp_path,
        "child-only",
        """\
        {% meta {"isChildOnly": true} %}Child {{ label }}
        """,
    )
    write_component(
        tmp_path,
        "defaults",
        """\
        {%- meta {"defaults": {"color": "red", "size": 10}} -%}
        {{ color }}/{{ size }}
        """,
    )
    write_component(tmp_path, "subdir/nested", "[{% render 'leaf' %}]")
    write_component(tmp_path, "subdir/leaf", "leaf")
    write_component(tmp_path, "multiline", "<ul>\n<li>one</li>\n\n<li>two</li>\n</ul>\n")
    return tmp_path
