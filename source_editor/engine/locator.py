"""
Anchor lookup: finds the syntax node a source line belongs to.

Lookups descend from the root, at each level entering the first child whose
line range contains the requested line, and stop at the first node of the
requested category. Comments are skipped: they may share a line with a
statement. Other sibling ranges are disjoint in a well-formed tree, so the
first containing child is the only one.

Child field names (``name``, ``declarator``, ``left``...) follow the
tree-sitter grammar conventions used by the language plugins.
"""

from enum import Enum
from typing import Collection, List, Optional

from source_editor.engine.errors import AmbiguousTargetError
from source_editor.models.syntax import SyntaxNode, SyntaxTree


class AnchorKind(str, Enum):
    """Kinds of node an anchor lookup can stop at."""

    STATEMENT = "statement"
    CLASS_DECLARATION = "class_declaration"
    CONSTRUCTOR_DECLARATION = "constructor_declaration"
    LOCAL_VARIABLE_OR_FIELD_NAME = "local_variable_or_field_name"


def _stop_types(tree: SyntaxTree, kind: AnchorKind) -> Collection[str]:
    categories = tree.categories
    if kind == AnchorKind.STATEMENT:
        return categories.statements
    if kind == AnchorKind.CLASS_DECLARATION:
        return categories.class_declarations
    if kind == AnchorKind.CONSTRUCTOR_DECLARATION:
        return categories.constructor_declarations
    raise ValueError(f"No node category for anchor kind {kind!r}")


def find_enclosing(tree: SyntaxTree, line_number: int, kind: AnchorKind) -> Optional[SyntaxNode]:
    """
    Find the node of ``kind`` enclosing ``line_number``.

    Args:
        tree: Parsed source
        line_number: Line number (1-indexed) in the original text
        kind: Category of node to stop at

    Returns:
        The first node of the category on the descent path, or None. For
        LOCAL_VARIABLE_OR_FIELD_NAME, the name node declared or assigned by
        the enclosing statement, or None when the statement is an inline
        expression.
    """
    if kind == AnchorKind.LOCAL_VARIABLE_OR_FIELD_NAME:
        return find_local_variable_or_field(tree, line_number)

    stop_types = _stop_types(tree, kind)
    comments = tree.categories.comments
    node = tree.root
    while True:
        child = next(
            (c for c in node.children if c.node_type not in comments and c.contains_line(line_number)),
            None,
        )
        if child is None:
            return None
        if child.node_type in stop_types:
            return child
        node = child


def find_statement(tree: SyntaxTree, line_number: int) -> Optional[SyntaxNode]:
    return find_enclosing(tree, line_number, AnchorKind.STATEMENT)


def find_class_declaration(tree: SyntaxTree, line_number: int) -> Optional[SyntaxNode]:
    return find_enclosing(tree, line_number, AnchorKind.CLASS_DECLARATION)


def find_constructor_declaration(tree: SyntaxTree, line_number: int) -> Optional[SyntaxNode]:
    return find_enclosing(tree, line_number, AnchorKind.CONSTRUCTOR_DECLARATION)


def _first_named_child(tree: SyntaxTree, node: SyntaxNode) -> Optional[SyntaxNode]:
    comments = tree.categories.comments
    return next((c for c in node.named_children if c.node_type not in comments), None)


def _declaration_parts(tree: SyntaxTree, statement: SyntaxNode):
    """Return (name, value) of a declaration or plain-name assignment statement."""
    categories = tree.categories
    if statement.node_type in categories.local_variable_declarations:
        declarator = statement.child_by_field("declarator")
        if declarator is None:
            return None, None
        return declarator.child_by_field("name"), declarator.child_by_field("value")

    if statement.node_type in categories.expression_statements:
        expression = _first_named_child(tree, statement)
        if expression is not None and expression.node_type in categories.assignments:
            target = expression.child_by_field("left")
            if target is not None and target.node_type in categories.identifiers:
                return target, expression.child_by_field("right")
    return None, None


def find_local_variable_or_field(tree: SyntaxTree, line_number: int) -> Optional[SyntaxNode]:
    """
    Find the variable name declared or assigned on ``line_number``.

    Only two statement shapes are understood: a local variable declaration
    (the first declarator's name) and an assignment to a plain name.
    """
    statement = find_statement(tree, line_number)
    if statement is None:
        return None
    name, _ = _declaration_parts(tree, statement)
    return name


def declared_value(tree: SyntaxTree, statement: SyntaxNode) -> Optional[SyntaxNode]:
    """Return the initializer or assigned value of a declaration statement."""
    _, value = _declaration_parts(tree, statement)
    return value


def statement_call(tree: SyntaxTree, statement: SyntaxNode) -> Optional[SyntaxNode]:
    """Return the method call an expression statement consists of, if any."""
    if statement.node_type not in tree.categories.expression_statements:
        return None
    expression = _first_named_child(tree, statement)
    if expression is not None and expression.node_type in tree.categories.method_calls:
        return expression
    return None


def call_arguments(tree: SyntaxTree, call: SyntaxNode) -> List[SyntaxNode]:
    """Return the argument expressions of a method call or object creation."""
    arguments = call.child_by_field("arguments")
    if arguments is None:
        return []
    comments = tree.categories.comments
    return [arg for arg in arguments.named_children if arg.node_type not in comments]


def call_name(tree: SyntaxTree, call: SyntaxNode) -> Optional[str]:
    name = call.child_by_field("name")
    return tree.text_of(name) if name is not None else None


def call_scope(tree: SyntaxTree, call: SyntaxNode) -> Optional[SyntaxNode]:
    """Return the object a method is called on (``foo`` in ``foo.bar()``)."""
    return call.child_by_field("object")


def constructed_type_name(tree: SyntaxTree, creation: SyntaxNode) -> Optional[str]:
    """Return the class name an object creation instantiates, without type arguments."""
    type_node = creation.child_by_field("type")
    if type_node is None:
        return None
    return tree.text_of(type_node).split("<", 1)[0].strip()


def find_constructor_call_argument(
    tree: SyntaxTree,
    call: SyntaxNode,
    class_names: Collection[str],
) -> Optional[SyntaxNode]:
    """
    Find the inline constructor call among a call's arguments.

    e.g. ``new Button("foo")`` in ``add(name, new Button("foo"))``.

    Args:
        tree: Parsed source
        call: Method call whose arguments are scanned
        class_names: Accepted class names (simple and fully qualified)

    Returns:
        The single matching object creation argument, or None if none matches

    Raises:
        AmbiguousTargetError: If more than one argument matches
    """
    matches = [
        arg for arg in call_arguments(tree, call)
        if arg.node_type in tree.categories.object_creations
        and constructed_type_name(tree, arg) in class_names
    ]
    if len(matches) > 1:
        raise AmbiguousTargetError(
            f"{len(matches)} matching constructor calls in {tree.text_of(call)!r}",
            details={"line": call.begin.line, "class_names": sorted(class_names)},
        )
    return matches[0] if matches else None
