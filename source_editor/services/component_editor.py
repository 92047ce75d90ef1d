"""
Component Editor: edit-batch builders for UI component source changes.

Builders take the syntax tree of a view class plus the line numbers where a
component is created and attached, and return the edits that add a new
component next to it or change one of its properties. ``ComponentEditor``
runs them against files through the FileTransformer.

Line numbers always refer to the file as it is when the session starts.
"""

import re
from enum import Enum
from functools import partial
from typing import Iterable, List, Optional, Sequence

from source_editor.engine.errors import AnchorNotFoundError
from source_editor.engine.locator import (
    call_arguments,
    call_name,
    call_scope,
    constructed_type_name,
    declared_value,
    find_class_declaration,
    find_constructor_call_argument,
    find_constructor_declaration,
    find_local_variable_or_field,
    find_statement,
    statement_call,
)
from source_editor.models.edit import Edit, EditBatch
from source_editor.models.result import TransformResult
from source_editor.models.syntax import SyntaxNode, SyntaxTree
from source_editor.services.file_transformer import FileTransformer, PathLike
from source_editor.utils.logging import get_logger


logger = get_logger(__name__)

INDENT = "    "


class ComponentType(Enum):
    """Components the editor knows how to create and modify."""

    BUTTON = "com.vaadin.flow.component.button.Button"
    TEXTFIELD = "com.vaadin.flow.component.textfield.TextField"

    @property
    def class_name(self) -> str:
        return self.value

    @property
    def simple_name(self) -> str:
        return self.value.rsplit(".", 1)[-1]

    @property
    def names(self) -> List[str]:
        return [self.class_name, self.simple_name]


class Where(str, Enum):
    """Placement of a new component relative to the reference component."""

    BEFORE = "before"
    AFTER = "after"
    INSIDE = "inside"


# Setters whose value is the component constructor's single string argument
CONSTRUCTOR_TEXT_SETTERS = {
    "setText": ComponentType.BUTTON,
    "setLabel": ComponentType.TEXTFIELD,
}


def java_string_literal(value: str) -> str:
    """Render ``value`` as a Java string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _first_to_lower(text: str) -> str:
    return text[:1].lower() + text[1:]


def variable_name(component_type: ComponentType, constructor_arguments: Sequence[str]) -> str:
    """
    Pick a variable name for a new component.

    A single constructor argument is camel-cased ("Hello world" -> helloWorld);
    otherwise the lower-camel simple class name is used.
    """
    if len(constructor_arguments) == 1:
        words = [re.sub(r"\W", "", word) for word in re.split(r"[\s\-]+", constructor_arguments[0])]
        words = [word for word in words if word]
        if words:
            name = _first_to_lower(words[0]) + "".join(word[:1].upper() + word[1:] for word in words[1:])
            if not name[0].isdigit():
                return name
    return _first_to_lower(component_type.simple_name)


def constructor_code(component_type: ComponentType, constructor_arguments: Sequence[str]) -> str:
    arguments = ", ".join(java_string_literal(arg) for arg in constructor_arguments)
    return f"new {component_type.simple_name}({arguments})"


def declaration_code(component_type: ComponentType, name: str, constructor_arguments: Sequence[str]) -> str:
    return f"{component_type.simple_name} {name} = {constructor_code(component_type, constructor_arguments)}"


def indentation(node: SyntaxNode) -> str:
    """Whitespace matching the column a node starts at."""
    return " " * (node.begin.column - 1)


def _imported_name(tree: SyntaxTree, import_node: SyntaxNode) -> str:
    text = tree.text_of(import_node)
    return re.sub(r"^import\s+(static\s+)?|\s|;$", "", text.strip())


def _top_level(tree: SyntaxTree, node_types: Iterable[str]) -> List[SyntaxNode]:
    node_types = set(node_types)
    return [child for child in tree.root.children if child.node_type in node_types]


def has_import(tree: SyntaxTree, class_name: str) -> bool:
    package = class_name.rsplit(".", 1)[0]
    for import_node in _top_level(tree, tree.categories.imports):
        if _imported_name(tree, import_node) in (class_name, f"{package}.*"):
            return True
    return False


def import_edit(tree: SyntaxTree, class_name: str) -> Optional[Edit]:
    """
    Return the edit that imports ``class_name``, or None if it is already imported.

    The import goes after the last import, or after the package declaration
    when there are no imports.
    """
    if has_import(tree, class_name):
        return None

    imports = _top_level(tree, tree.categories.imports)
    if imports:
        return Edit.insert_after(imports[-1], f"\nimport {class_name};")

    packages = _top_level(tree, tree.categories.package_declarations)
    if packages:
        return Edit.insert_after(packages[0], f"\n\nimport {class_name};")

    if tree.root.children:
        return Edit.insert_before(tree.root.children[0], f"import {class_name};\n\n")
    raise AnchorNotFoundError("Cannot add an import to an empty source file")


def _block_members(block: SyntaxNode, node_types: Iterable[str]) -> List[SyntaxNode]:
    node_types = set(node_types)
    return [child for child in block.children if child.node_type in node_types]


def _statements_before_brace(tree: SyntaxTree, body: SyntaxNode, lines: Sequence[str]) -> str:
    """Format ``lines`` for insertion right before the closing brace of ``body``."""
    owner_indent = indentation(body.parent or body)
    closing = tree.source.split("\n")[body.end.line - 1][:body.end.column - 1]

    if closing.strip():
        # Brace shares its line with other code, e.g. "public View() {}"
        inner = owner_indent + INDENT
        return "\n" + "".join(f"{inner}{line}\n" for line in lines) + owner_indent

    statements = _block_members(body, tree.categories.statements)
    inner = indentation(statements[0]) if statements else owner_indent + INDENT
    if len(inner) <= len(closing):
        inner = closing + INDENT
    code = "".join(f"{inner}{line}\n" for line in lines)
    # The brace line's own indentation already precedes the insertion point
    return code[len(closing):] + closing


def _add_component_to_class(
    tree: SyntaxTree,
    create_line: int,
    component_type: ComponentType,
    constructor_arguments: Sequence[str],
) -> EditBatch:
    name = variable_name(component_type, constructor_arguments)
    lines = [
        f"{declaration_code(component_type, name, constructor_arguments)};",
        f"add({name});",
    ]

    constructor = find_constructor_declaration(tree, create_line)
    if constructor is not None:
        body = constructor.child_by_field("body")
        if body is None:
            raise AnchorNotFoundError(f"Constructor on line {create_line} has no body")
        return [Edit.insert_at_block_end(body, _statements_before_brace(tree, body, lines))]

    class_declaration = find_class_declaration(tree, create_line)
    if class_declaration is None:
        raise AnchorNotFoundError(f"No class or constructor on line {create_line}")

    class_body = class_declaration.child_by_field("body")
    class_name = class_declaration.child_by_field("name")
    if class_body is None or class_name is None:
        raise AnchorNotFoundError(f"Class on line {create_line} has no name or body")
    if _block_members(class_body, tree.categories.constructor_declarations):
        # The create line points at a class only when it has no constructor
        logger.warning(
            f"Class on line {create_line} already has a constructor; nothing added",
            extra={"line": create_line},
        )
        return []

    member = indentation(class_declaration) + INDENT
    inner = member + INDENT
    constructor_text = (
        f"\n{member}public {tree.text_of(class_name)}() {{\n"
        + "".join(f"{inner}{line}\n" for line in lines)
        + f"{member}}}"
    )
    return [Edit.insert_after_needle(class_name, "{", constructor_text)]


def _inline_reference(
    tree: SyntaxTree,
    call: SyntaxNode,
    create_line: int,
    component_type: ComponentType,
) -> Optional[SyntaxNode]:
    """Find the inline constructor argument created on ``create_line``."""
    on_line = [
        arg for arg in call_arguments(tree, call)
        if arg.node_type in tree.categories.object_creations and arg.contains_line(create_line)
    ]
    if len(on_line) == 1:
        return on_line[0]
    return find_constructor_call_argument(tree, call, component_type.names)


def build_add_component(
    tree: SyntaxTree,
    create_line: int,
    attach_line: int,
    where: Where,
    component_type: ComponentType,
    *constructor_arguments: str,
) -> EditBatch:
    """
    Build the edits that add a new component next to (or inside) another one.

    Args:
        tree: Syntax tree of the view source
        create_line: Line where the reference component is created. For
            Where.INSIDE this may be a class declaration or constructor line.
        attach_line: Line where the reference component is attached
            (e.g. ``add(name, sayHello)``)
        where: Placement of the new component
        component_type: Type of the new component
        *constructor_arguments: String arguments of the new component's constructor

    Returns:
        Edit batch

    Raises:
        AnchorNotFoundError: If a required statement cannot be found
        AmbiguousTargetError: If the inline reference component is ambiguous
    """
    mods: EditBatch = []

    imported = import_edit(tree, component_type.class_name)
    if imported is not None:
        mods.append(imported)

    create_statement = find_statement(tree, create_line)
    if create_statement is None:
        if where == Where.INSIDE:
            mods.extend(_add_component_to_class(tree, create_line, component_type, constructor_arguments))
            return mods
        raise AnchorNotFoundError(f"No statement on line {create_line}", details={"line": create_line})

    attach_statement = find_statement(tree, attach_line)
    if attach_statement is None:
        raise AnchorNotFoundError(f"No statement on line {attach_line}", details={"line": attach_line})

    name = variable_name(component_type, constructor_arguments)
    indent = indentation(attach_statement)
    declaration = Edit.insert_before(
        attach_statement,
        f"{declaration_code(component_type, name, constructor_arguments)};\n{indent}",
    )

    reference_name = find_local_variable_or_field(tree, create_line)

    if where == Where.INSIDE:
        if reference_name is None:
            raise AnchorNotFoundError(
                f"Component created on line {create_line} has no variable to add to",
                details={"line": create_line},
            )
        # Same anchor as the declaration; edits sharing an anchor apply in batch order
        mods.append(Edit.insert_line_after(
            attach_statement,
            f"{indent}{tree.text_of(reference_name)}.add({name});\n",
        ))
        mods.append(declaration)
        return mods

    mods.append(declaration)

    attach_call = statement_call(tree, attach_statement)
    if attach_call is None:
        return mods

    reference: Optional[SyntaxNode] = None
    if reference_name is None:
        if attach_statement is create_statement:
            reference = _inline_reference(tree, attach_call, create_line, component_type)
    else:
        wanted = tree.text_of(reference_name)
        reference = next(
            (
                arg for arg in call_arguments(tree, attach_call)
                if arg.node_type in tree.categories.identifiers and tree.text_of(arg) == wanted
            ),
            None,
        )

    if reference is None:
        logger.warning(
            f"Reference component not found in call on line {attach_line}",
            extra={"line": attach_line},
        )
    elif where == Where.BEFORE:
        mods.append(Edit.insert_before(reference, f"{name}, "))
    else:
        mods.append(Edit.insert_after(reference, f", {name}"))
    return mods


def _constructor_argument_edit(
    tree: SyntaxTree,
    creation: SyntaxNode,
    method_name: str,
    value: str,
) -> Optional[Edit]:
    """Replace the constructor's string argument when ``method_name`` sets it."""
    setter_type = CONSTRUCTOR_TEXT_SETTERS.get(method_name)
    if setter_type is None or constructed_type_name(tree, creation) not in setter_type.names:
        return None
    arguments = call_arguments(tree, creation)
    if len(arguments) == 1 and arguments[0].node_type in tree.categories.string_literals:
        return Edit.replace(arguments[0], java_string_literal(value))
    return None


def _find_method_call(
    tree: SyntaxTree,
    block: SyntaxNode,
    after: SyntaxNode,
    variable: str,
    method_name: str,
) -> Optional[SyntaxNode]:
    """Find a ``variable.method_name(...)`` statement following ``after`` in ``block``."""
    found_reference = False
    for statement in block.children:
        if statement is after:
            found_reference = True
            continue
        if not found_reference:
            continue
        call = statement_call(tree, statement)
        if call is None:
            continue
        scope = call_scope(tree, call)
        if (
            scope is not None
            and scope.node_type in tree.categories.identifiers
            and tree.text_of(scope) == variable
            and call_name(tree, call) == method_name
        ):
            return statement
    return None


def _add_or_replace_call(
    tree: SyntaxTree,
    statement: SyntaxNode,
    variable: str,
    method_name: str,
    value: str,
) -> Edit:
    call_code = f"{variable}.{method_name}({java_string_literal(value)});"
    existing = None
    if statement.parent is not None:
        existing = _find_method_call(tree, statement.parent, statement, variable, method_name)
    if existing is not None:
        return Edit.replace(existing, call_code)
    return Edit.insert_line_after(statement, f"{indentation(statement)}{call_code}\n")


def build_set_component_attribute(
    tree: SyntaxTree,
    create_line: int,
    attach_line: int,
    component_type: ComponentType,
    method_name: str,
    value: str,
) -> EditBatch:
    """
    Build the edits that set a component property.

    The constructor's string argument is replaced when the setter maps to it
    (``setText`` on a Button, ``setLabel`` on a TextField). Otherwise an
    existing ``name.method(...)`` call after the declaration is replaced, or a
    new call is added on the line after it.

    Args:
        tree: Syntax tree of the view source
        create_line: Line where the component is created
        attach_line: Line where the component is attached (unused for
            declared components, kept for symmetry with build_add_component)
        component_type: Type of the component
        method_name: Setter name, e.g. ``setText``
        value: String value passed to the setter

    Returns:
        Edit batch; empty when an inline component cannot be modified

    Raises:
        AnchorNotFoundError: If there is no statement on ``create_line``
        AmbiguousTargetError: If several inline components match
    """
    statement = find_statement(tree, create_line)
    if statement is None:
        raise AnchorNotFoundError(f"No statement on line {create_line}", details={"line": create_line})

    name = find_local_variable_or_field(tree, create_line)
    if name is None:
        call = statement_call(tree, statement)
        if call is None:
            return []
        creation = find_constructor_call_argument(tree, call, component_type.names)
        if creation is None:
            return []
        edit = _constructor_argument_edit(tree, creation, method_name, value)
        return [edit] if edit is not None else []

    initializer = declared_value(tree, statement)
    if initializer is not None and initializer.node_type in tree.categories.object_creations:
        edit = _constructor_argument_edit(tree, initializer, method_name, value)
        if edit is not None:
            return [edit]

    return [_add_or_replace_call(tree, statement, tree.text_of(name), method_name, value)]


class ComponentEditor:
    """Applies component edits to view source files."""

    def __init__(self, transformer: Optional[FileTransformer] = None):
        self._transformer = transformer or FileTransformer()

    def add_component(
        self,
        path: PathLike,
        create_line: int,
        attach_line: int,
        where: Where,
        component_type: ComponentType,
        *constructor_arguments: str,
    ) -> TransformResult:
        return self._transformer.transform_file(
            path,
            lambda tree: build_add_component(
                tree, create_line, attach_line, where, component_type, *constructor_arguments
            ),
        )

    def add_component_before(self, path: PathLike, create_line: int, attach_line: int,
                             component_type: ComponentType, *constructor_arguments: str) -> TransformResult:
        return self.add_component(path, create_line, attach_line, Where.BEFORE,
                                  component_type, *constructor_arguments)

    def add_component_after(self, path: PathLike, create_line: int, attach_line: int,
                            component_type: ComponentType, *constructor_arguments: str) -> TransformResult:
        return self.add_component(path, create_line, attach_line, Where.AFTER,
                                  component_type, *constructor_arguments)

    def add_component_inside(self, path: PathLike, create_line: int, attach_line: int,
                             component_type: ComponentType, *constructor_arguments: str) -> TransformResult:
        return self.add_component(path, create_line, attach_line, Where.INSIDE,
                                  component_type, *constructor_arguments)

    def set_component_attribute(
        self,
        path: PathLike,
        create_line: int,
        attach_line: int,
        component_type: ComponentType,
        method_name: str,
        value: str,
    ) -> TransformResult:
        return self._transformer.transform_file(
            path,
            partial(
                build_set_component_attribute,
                create_line=create_line,
                attach_line=attach_line,
                component_type=component_type,
                method_name=method_name,
                value=value,
            ),
        )
