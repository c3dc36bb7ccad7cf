"""Abstract syntax tree of a bisaya program.

Nodes are frozen dataclasses built once by the parser. Children are owned by exactly one parent and there are no parent
back-pointers; every node carries the line/column of the token it was built from, which takes no part in equality.

```
Block(nodes=[
    Declaration(name='x', data_type='NUMERO', nodes=[
        BinaryOp(op='+', nodes=[
            Literal(value=INT(2)),
            Literal(value=INT(3))
        ])
    ])
])
```
"""

from dataclasses import dataclass, field, fields

from bisaya.core.values import Value


POSITION = ("line", "column")


@dataclass(frozen=True, kw_only=True)
class Node:
    line: int = field(default=0, compare=False, repr=False)
    column: int = field(default=0, compare=False, repr=False)

    @property
    def nodes(self):
        """Child nodes, in field order."""
        children = []
        for f in fields(self):
            attr = getattr(self, f.name)
            if isinstance(attr, Node):
                children.append(attr)
            elif isinstance(attr, tuple):
                children.extend(item for item in attr if isinstance(item, Node))
        return children

    def _attrs(self):
        """Non-node fields, formatted for display."""
        attrs = []
        for f in fields(self):
            attr = getattr(self, f.name)
            if f.name in POSITION or isinstance(attr, Node) or attr is None:
                continue
            if isinstance(attr, tuple) and any(isinstance(item, Node) for item in attr):
                continue
            if isinstance(attr, tuple) and not attr:
                continue
            attrs.append(f"{f.name}={attr!r}")
        return attrs

    def display(self, indents=0):
        """Recursively displays the tree rooted at this node with readable format.

        Format:
        <Node>(<attr>=<value>, nodes=[
            <Node>(<attr>=<value>, nodes=[
                ...
                <Node>(<attr>=<value>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}({', '.join(self._attrs())}"
        if self.nodes:
            result += ", nodes=[" if self._attrs() else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


# expressions

@dataclass(frozen=True)
class Literal(Node):
    value: Value


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class BinaryOp(Node):
    left: Node
    op: str
    right: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass(frozen=True)
class Call(Node):
    """Syntactic call form name(args). Parsed, but has no runtime behavior."""
    name: str
    args: tuple = ()


# statements

@dataclass(frozen=True)
class Assignment(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class Declaration(Node):
    name: str
    data_type: str
    init: Node | None = None


@dataclass(frozen=True)
class Block(Node):
    statements: tuple = ()


@dataclass(frozen=True)
class If(Node):
    condition: Node
    then_block: Block
    else_branch: "Block | If | None" = None  # an If here continues an else-if chain


@dataclass(frozen=True)
class While(Node):
    condition: Node
    body: Block


@dataclass(frozen=True)
class DoWhile(Node):
    body: Block
    condition: Node


@dataclass(frozen=True)
class ForLoop(Node):
    init: Assignment
    condition: Node
    increment: Assignment
    body: Block


@dataclass(frozen=True)
class Input(Node):
    names: tuple


@dataclass(frozen=True)
class Output(Node):
    expression: Node
