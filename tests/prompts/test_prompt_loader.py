import pytest
from jinja2 import UndefinedError

from askdb.prompts.loader import PromptLoader, get_prompt_loader


def test_prompt_loader_strips_front_matter():
    loader = PromptLoader()
    content = loader.load("sql/system.md")
    assert not content.startswith("---")
    assert content.startswith("You are a helpful assistant that writes SQL for Postgres.")


def test_prompt_loader_reads_metadata():
    loader = PromptLoader()
    assert loader.get_metadata("title/system.md") == {"name": "title_system", "version": 1}


def test_prompt_loader_renders_template():
    loader = PromptLoader()
    rendered = loader.render("sql/system.md", schema='[{"name":"users"}]')
    assert rendered.endswith('Schema: [{"name":"users"}]')
    assert 'public."table.name"' in rendered


def test_prompt_loader_requires_variables():
    with pytest.raises(UndefinedError):
        PromptLoader().render("suggestions/instruction.md", schema="[]")


def test_prompt_loader_missing_prompt():
    loader = PromptLoader()
    with pytest.raises(FileNotFoundError):
        loader.load("sql/missing.md")
    with pytest.raises(FileNotFoundError):
        loader.render("sql/missing.md")


def test_prompt_loader_custom_directory(tmp_path):
    (tmp_path / "greeting.md").write_text("---\nname: greeting\n---\nHello {{ who }}\n")

    loader = PromptLoader(tmp_path)

    assert loader.render("greeting.md", who="Ada") == "Hello Ada"


def test_shared_loader_is_cached():
    assert get_prompt_loader() is get_prompt_loader()
