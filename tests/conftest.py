"""
Shared pytest fixtures for the Ambit test suite.

Usage in tests:
    def test_something(tree_factory):
        sample_file(tree_factory)
        tree = tree_factory.tree()

    def test_with_project(sample_project):
        # sample_project is a real directory with Python and Markdown files
        result = scan_project(sample_project, default_registry())
"""

import textwrap

import pytest

from ambit.core.ledger import ContextLedger
from tests.factories import TreeFactory, sample_file


@pytest.fixture
def tree_factory(tmp_path):
    """Empty TreeFactory rooted at a temp directory."""
    return TreeFactory(tmp_path)


@pytest.fixture
def sample_tree(tree_factory):
    """ProjectTree holding only the sample file src/lib.py."""
    sample_file(tree_factory)
    return tree_factory.tree()


@pytest.fixture
def ledger():
    return ContextLedger()


PYTHON_SOURCE = textwrap.dedent('''\
    import os


    class Parser:
        """Parses things."""

        def parse(self, text):
            return text.split()

        @staticmethod
        def reset():
            pass


    def helper(x):
        def inner():
            return x
        return inner
''')

MARKDOWN_SOURCE = textwrap.dedent('''\
    # Guide

    Intro text.

    ## Install

    Run the installer.

    ## Usage

    ```
    # not a heading
    ```
''')


@pytest.fixture
def sample_project(tmp_path):
    """
    A project directory on disk:

        src/lib.py         (Parser, Parser/parse, Parser/reset, helper)
        docs/guide.md      (Guide, Guide/Install, Guide/Usage)
        node_modules/x.py  (excluded)
        .hidden/y.py       (hidden)
    """
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "lib.py").write_text(PYTHON_SOURCE)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text(MARKDOWN_SOURCE)
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "x.py").write_text("def ignored(): pass\n")
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "y.py").write_text("def hidden(): pass\n")
    return tmp_path
