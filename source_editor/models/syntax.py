"""Syntax tree data models."""

from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class SyntaxPosition(BaseModel):
    """A 1-based (line, column) position; columns count characters, not bytes."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=1, description="Line number (1-indexed)")
    column: int = Field(..., ge=1, description="Character column (1-indexed)")

    def right(self, columns: int) -> "SyntaxPosition":
        """Return the position ``columns`` characters further on the same line."""
        return SyntaxPosition(line=self.line, column=self.column + columns)

    def next_line(self) -> "SyntaxPosition":
        """Return the first column of the following line."""
        return SyntaxPosition(line=self.line + 1, column=1)

    def __str__(self) -> str:
        return f"(line {self.line},col {self.column})"


class SyntaxNode(BaseModel):
    """
    A node of a parsed source file.

    ``end`` is inclusive: it is the position of the last character the node
    spans. Parent links are set when the parent is built and are not part of
    the model's fields.
    """

    model_config = ConfigDict(frozen=True)

    node_type: str
    begin: SyntaxPosition
    end: SyntaxPosition
    field_name: Optional[str] = None
    named: bool = True
    children: Tuple['SyntaxNode', ...] = ()

    _parent: Optional['SyntaxNode'] = PrivateAttr(default=None)

    def model_post_init(self, __context) -> None:
        for child in self.children:
            child._parent = self

    # Nodes are anchors: two nodes are the same anchor only if they are the same object
    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    @property
    def parent(self) -> Optional['SyntaxNode']:
        return self._parent

    @property
    def root(self) -> 'SyntaxNode':
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def named_children(self) -> List['SyntaxNode']:
        return [child for child in self.children if child.named]

    def contains_line(self, line_number: int) -> bool:
        """Check whether ``line_number`` falls inside [begin.line, end.line]."""
        return self.begin.line <= line_number <= self.end.line

    def child_by_field(self, field_name: str) -> Optional['SyntaxNode']:
        for child in self.children:
            if child.field_name == field_name:
                return child
        return None

    def walk(self) -> Iterator['SyntaxNode']:
        """Iterate over this node and all its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __str__(self) -> str:
        return f"{self.node_type} {self.begin}-{self.end}"


SyntaxNode.model_rebuild()


class NodeCategories(BaseModel):
    """Grammar node types grouped by the role they play for anchor lookup."""

    statements: List[str] = Field(default_factory=list)
    class_declarations: List[str] = Field(default_factory=list)
    constructor_declarations: List[str] = Field(default_factory=list)
    local_variable_declarations: List[str] = Field(default_factory=list)
    expression_statements: List[str] = Field(default_factory=list)
    assignments: List[str] = Field(default_factory=list)
    method_calls: List[str] = Field(default_factory=list)
    object_creations: List[str] = Field(default_factory=list)
    identifiers: List[str] = Field(default_factory=list)
    string_literals: List[str] = Field(default_factory=list)
    imports: List[str] = Field(default_factory=list)
    package_declarations: List[str] = Field(default_factory=list)
    comments: List[str] = Field(default_factory=list)


class SyntaxTree(BaseModel):
    """Immutable parse result of one source text."""

    model_config = ConfigDict(frozen=True)

    root: SyntaxNode
    source: str
    language: str
    categories: NodeCategories = Field(default_factory=NodeCategories)

    def contains(self, node: SyntaxNode) -> bool:
        """Check whether ``node`` is one of this tree's own nodes."""
        return node.root is self.root

    def text_of(self, node: SyntaxNode) -> str:
        """Return the source text spanned by ``node``."""
        from source_editor.engine.positions import resolve_position

        start = resolve_position(self.source, node.begin)
        end = resolve_position(self.source, node.end)
        return self.source[start:end + 1]

    def iter_nodes(self, *node_types: str) -> Iterator[SyntaxNode]:
        for node in self.root.walk():
            if node.node_type in node_types:
                yield node
