"""Tests for MigrationParser - whole-file parsing into MigrationNode."""

import pytest

from alembic_tree.graph.parsers.migration import MigrationParser, parse_migration
from tests.core.graph_test_helpers import migration_text


@pytest.fixture
def parser():
    return MigrationParser()


class TestBasicParsing:
    def test_revision_without_down_revision_is_base(self, parser):
        node = parser.parse('revision = "a1"\n', "versions/a1_initial.py")

        assert node.id == "a1"
        assert node.parent_ids == ()
        assert node.is_base

    def test_single_parent(self, parser):
        text = migration_text('"b2"', '"a1"')

        node = parser.parse(text, "versions/b2_add_users.py")

        assert node.id == "b2"
        assert node.parent_ids == ("a1",)
        assert not node.is_merge

    def test_merge_parents_in_order(self, parser):
        text = migration_text('"c3"', "('a1', 'b2')")

        node = parser.parse(text, "versions/c3_merge.py")

        assert node.parent_ids == ("a1", "b2")
        assert node.is_merge

    def test_down_revision_none_is_base(self, parser):
        node = parser.parse(migration_text("'e5'", "None"), "versions/e5.py")

        assert node.parent_ids == ()
        assert node.is_base

    def test_annotated_declarations(self, parser):
        text = migration_text("'b2'", "'a1'", annotated=True)

        node = parser.parse(text, "versions/b2.py")

        assert node.id == "b2"
        assert node.parent_ids == ("a1",)

    def test_multiline_merge_tuple(self, parser):
        text = "\n".join(
            [
                'revision = "m1"',
                "down_revision = (",
                '    "a1",',
                '    "b2",',
                ")",
            ]
        )

        node = parser.parse(text, "versions/m1_merge.py")

        assert node.parent_ids == ("a1", "b2")


class TestSkipping:
    def test_no_revision_line_gives_none(self, parser):
        assert parser.parse("from alembic import op\n", "versions/__init__.py") is None

    def test_down_revision_only_gives_none(self, parser):
        assert parser.parse("down_revision = None\n", "versions/x.py") is None

    def test_empty_text_gives_none(self, parser):
        assert parser.parse("", "versions/empty.py") is None

    def test_empty_revision_literal_gives_none(self, parser):
        assert parser.parse('revision = ""\n', "versions/x.py") is None

    def test_garbage_never_raises(self, parser):
        text = "revision = ((((\ndown_revision = [[['\x00\n\t#"

        node = parser.parse(text, "versions/garbage.py")

        assert node is not None
        assert node.parent_ids == ()


class TestParentNormalization:
    def test_duplicate_parents_removed(self, parser):
        node = parser.parse(migration_text('"c3"', "('a1', 'a1', 'b2')"), "c3.py")

        assert node.parent_ids == ("a1", "b2")

    def test_unparseable_parent_expression_is_base(self, parser):
        node = parser.parse(migration_text('"c3"', "get_parent()"), "c3.py")

        assert node.parent_ids == ()

    def test_inline_comments_ignored(self, parser):
        text = 'revision = "b2"  # this one\ndown_revision = "a1"  # previous\n'

        node = parser.parse(text, "b2.py")

        assert node.id == "b2"
        assert node.parent_ids == ("a1",)


class TestLabel:
    def test_label_uses_file_stem(self, parser):
        node = parser.parse('revision = "a1"', "/repo/migrations/versions/a1_create_users.py")

        assert node.label == "a1 (a1_create_users)"

    def test_source_carried_through(self, parser):
        node = parser.parse('revision = "a1"', "migrations/versions/a1.py")

        assert node.source == "migrations/versions/a1.py"


class TestParseMany:
    def test_skips_blobs_without_revision(self, parser):
        blobs = [
            ('revision = "a1"', "a1.py"),
            ("# helpers", "__init__.py"),
            ('revision = "b2"\ndown_revision = "a1"', "b2.py"),
        ]

        nodes = list(parser.parse_many(blobs))

        assert [n.id for n in nodes] == ["a1", "b2"]


def test_module_level_parse_migration():
    node = parse_migration('revision = "a1"', "a1.py")

    assert node.id == "a1"
