"""Unit tests for anchor lookup on parsed Java sources."""

import pytest

from helpers import FIXTURES_DIR, line_of
from source_editor.engine.errors import AmbiguousTargetError
from source_editor.engine.locator import (
    AnchorKind,
    call_arguments,
    call_name,
    call_scope,
    constructed_type_name,
    declared_value,
    find_class_declaration,
    find_constructor_call_argument,
    find_constructor_declaration,
    find_enclosing,
    find_local_variable_or_field,
    find_statement,
    statement_call,
)


@pytest.fixture(scope="module")
def demo_source():
    return (FIXTURES_DIR / "DemoFile.java").read_text(encoding="utf-8")


@pytest.fixture
def demo_tree(java_plugin, demo_source):
    return java_plugin.parse(demo_source)


class TestFindEnclosing:
    """Test cases for the line-based descent."""

    def test_statement_contains_line(self, demo_tree, demo_source):
        for fragment in ("name = new TextField", "Button sayHello4", "add(name, sayHello"):
            line = line_of(demo_source, fragment)
            statement = find_statement(demo_tree, line)
            assert statement is not None
            assert statement.contains_line(line)
            assert fragment in demo_tree.text_of(statement)

    def test_statement_kinds(self, demo_tree, demo_source):
        declaration = find_statement(demo_tree, line_of(demo_source, "Button sayHello2"))
        call = find_statement(demo_tree, line_of(demo_source, "add(sayHello5"))

        assert declaration.node_type == "local_variable_declaration"
        assert call.node_type == "expression_statement"

    def test_no_statement_on_class_or_constructor_line(self, demo_tree, demo_source):
        assert find_statement(demo_tree, line_of(demo_source, "public class DemoFile")) is None
        assert find_statement(demo_tree, line_of(demo_source, "public DemoFile()")) is None

    def test_no_statement_on_blank_line(self, demo_tree, demo_source):
        blank = line_of(demo_source, "add(name, sayHello") - 1
        assert find_statement(demo_tree, blank) is None

    def test_line_outside_source(self, demo_tree):
        assert find_statement(demo_tree, 1000) is None

    def test_class_declaration(self, demo_tree, demo_source):
        declaration = find_class_declaration(demo_tree, line_of(demo_source, "public class DemoFile"))

        assert declaration.node_type == "class_declaration"
        assert demo_tree.text_of(declaration.child_by_field("name")) == "DemoFile"

    def test_class_declaration_encloses_members(self, demo_tree, demo_source):
        declaration = find_class_declaration(demo_tree, line_of(demo_source, "Button sayHello3"))
        assert declaration.node_type == "class_declaration"

    def test_constructor_declaration(self, demo_tree, demo_source):
        constructor = find_constructor_declaration(demo_tree, line_of(demo_source, "public DemoFile()"))

        assert constructor.node_type == "constructor_declaration"
        assert constructor.child_by_field("body") is not None

    def test_siblings_are_disjoint(self, demo_tree):
        for node in demo_tree.root.walk():
            children = node.children
            for previous, current in zip(children, children[1:]):
                assert (previous.end.line, previous.end.column) < (current.begin.line, current.begin.column)

    def test_anchor_kind_dispatch(self, demo_tree, demo_source):
        line = line_of(demo_source, "Button sayHello2")

        assert find_enclosing(demo_tree, line, AnchorKind.STATEMENT) is find_statement(demo_tree, line)
        name = find_enclosing(demo_tree, line, AnchorKind.LOCAL_VARIABLE_OR_FIELD_NAME)
        assert demo_tree.text_of(name) == "sayHello2"

    def test_comment_before_statement_on_same_line(self, java_plugin):
        tree = java_plugin.parse(
            "class A {\n"
            "    A() {\n"
            '        /* greet */ Button sayHello = new Button("Say hello");\n'
            "        // trailing\n"
            "    }\n"
            "}\n"
        )

        statement = find_statement(tree, 3)

        assert statement.node_type == "local_variable_declaration"
        assert tree.text_of(find_local_variable_or_field(tree, 3)) == "sayHello"
        assert find_statement(tree, 4) is None


class TestDeclarations:
    """Test cases for declared names and values."""

    def test_local_variable_name(self, demo_tree, demo_source):
        name = find_local_variable_or_field(demo_tree, line_of(demo_source, "Button sayHello4"))
        assert demo_tree.text_of(name) == "sayHello4"

    def test_field_assignment_name(self, demo_tree, demo_source):
        name = find_local_variable_or_field(demo_tree, line_of(demo_source, "name = new TextField"))
        assert demo_tree.text_of(name) == "name"

    def test_inline_expression_has_no_name(self, demo_tree, demo_source):
        assert find_local_variable_or_field(demo_tree, line_of(demo_source, "add(sayHello5")) is None

    def test_declared_value(self, demo_tree, demo_source):
        statement = find_statement(demo_tree, line_of(demo_source, "Button sayHello2"))
        value = declared_value(demo_tree, statement)

        assert demo_tree.text_of(value) == 'new Button("Say hello2")'
        assert constructed_type_name(demo_tree, value) == "Button"


class TestCalls:
    """Test cases for method call helpers."""

    def test_call_parts(self, demo_tree, demo_source):
        statement = find_statement(demo_tree, line_of(demo_source, "sayHello5.setText"))
        call = statement_call(demo_tree, statement)

        assert call_name(demo_tree, call) == "setText"
        assert demo_tree.text_of(call_scope(demo_tree, call)) == "sayHello5"
        assert [demo_tree.text_of(a) for a in call_arguments(demo_tree, call)] == ['"Say hello5"']

    def test_unscoped_call(self, demo_tree, demo_source):
        call = statement_call(demo_tree, find_statement(demo_tree, line_of(demo_source, "add(name")))

        assert call_scope(demo_tree, call) is None
        assert [demo_tree.text_of(a) for a in call_arguments(demo_tree, call)] == [
            "name", "sayHello", "sayHello2", "sayHello3", "sayHello4",
        ]

    def test_declaration_is_not_a_call(self, demo_tree, demo_source):
        statement = find_statement(demo_tree, line_of(demo_source, "Button sayHello2"))
        assert statement_call(demo_tree, statement) is None

    def test_constructor_call_argument(self, demo_tree, demo_source):
        call = statement_call(demo_tree, find_statement(demo_tree, line_of(demo_source, "add(sayHello5")))

        creation = find_constructor_call_argument(demo_tree, call, ["Button"])

        assert demo_tree.text_of(creation) == 'new Button("Say hello6")'
        assert find_constructor_call_argument(demo_tree, call, ["TextField"]) is None

    def test_ambiguous_constructor_call_argument(self, java_plugin):
        tree = java_plugin.parse(
            "class A {\n"
            "    A() {\n"
            '        add(new Button("a"), new Button("b"));\n'
            "    }\n"
            "}\n"
        )
        call = statement_call(tree, find_statement(tree, 3))

        with pytest.raises(AmbiguousTargetError):
            find_constructor_call_argument(tree, call, ["Button"])

    def test_generic_type_arguments_are_ignored(self, java_plugin):
        tree = java_plugin.parse("class A {\n    A() {\n        x = new Grid<Person>();\n    }\n}\n")
        value = declared_value(tree, find_statement(tree, 3))

        assert constructed_type_name(tree, value) == "Grid"
