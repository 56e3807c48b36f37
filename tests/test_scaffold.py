from datetime import datetime, timezone

import pytest

from blogops.core.content import ContentRepository, new_page
from blogops.core.errors import ContentExistsError


def test_new_page_front_matter(tmp_path):
    when = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    path = new_page(tmp_path, "devlog", "week-12", page_type="devlog", tags=["fastapi"], weight=5, now=when)
    assert path == tmp_path / "devlog" / "week-12.md"

    page = ContentRepository(tmp_path).load_page("devlog/week-12.md")
    fm = page.front_matter
    assert fm.title == "Week 12"
    assert fm.type == "devlog"
    assert fm.tags == ["fastapi"]
    assert fm.weight == 5
    assert fm.draft is True
    assert fm.date == when


def test_new_page_refuses_overwrite(tmp_path):
    new_page(tmp_path, "notes", "a", title="A")
    with pytest.raises(ContentExistsError):
        new_page(tmp_path, "notes", "a")


@pytest.mark.parametrize("slug", ["../escape", "a/b", ""])
def test_new_page_rejects_bad_slug(tmp_path, slug):
    with pytest.raises(ValueError):
        new_page(tmp_path, "notes", slug)


def test_new_page_title_with_control_characters_stays_parseable(tmp_path):
    new_page(tmp_path, "notes", "odd", title="a\rb\x01c", tags=["x"])
    [page] = ContentRepository(tmp_path).pages()
    assert page.title == "a\rb\x01c"
