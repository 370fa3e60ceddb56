"""Detection of restricted exports in a single JavaScript/TypeScript file.

Four equivalent ways of reaching a restricted export are recognized:

1. Named imports: ``import { render } from 'react-dom'`` (aliases match on
   the exported name). ``require('react-dom').render`` assigned to a
   variable counts as well.
2. Whole-module bindings: ``import ReactDOM from 'react-dom'``,
   ``import * as ReactDOM from 'react-dom'``,
   ``const ReactDOM = require('react-dom')`` and the TypeScript form
   ``import ReactDOM = require('react-dom')``. These only record the binding.
3. Member access on a binding: ``ReactDOM.render(...)``.
4. Destructuring from a binding or an inline require:
   ``const { render } = ReactDOM`` and
   ``const { render } = require('react-dom')``.

The analysis is purely syntactic and file-local. Bindings are tracked by
name for the whole file, without scopes: a later import or variable
declaration of the same name replaces the earlier binding from its position
on, even inside a nested function. A declaration whose value is not a
``require()`` call removes the binding. Plain assignments
(``ReactDOM = require('other')``) are ignored. TypeScript type-only imports
(``import type { render }``, ``import { type render }``) are erased at
runtime and are not reported.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from tree_sitter import Node, Tree

from compat_lint.parser import LanguageParser, ensure_well_formed, node_position, node_text
from compat_lint.restrictions import RestrictionTable
from compat_lint.types import Violation, ViolationKind


class NodeKind(str, Enum):
    """tree-sitter node types the detector inspects."""

    IMPORT_STATEMENT = "import_statement"
    VARIABLE_DECLARATOR = "variable_declarator"
    MEMBER_EXPRESSION = "member_expression"


_NODE_KINDS = {kind.value: kind for kind in NodeKind}


@dataclass
class DetectionContext:
    """State of one file's analysis. Never shared between files."""

    source: bytes
    restrictions: RestrictionTable
    bindings: dict[str, str] = field(default_factory=dict)
    violations: list[Violation] = field(default_factory=list)

    def text(self, node: Node) -> str:
        return node_text(node, self.source)

    def bind(self, local_name: str, module: str) -> None:
        self.bindings[local_name] = module

    def unbind(self, local_name: str) -> None:
        self.bindings.pop(local_name, None)

    def report(self, kind: ViolationKind, symbol: str, module: str, node: Node) -> None:
        line, column = node_position(node, self.source)
        self.violations.append(Violation(kind, symbol, module, line, column))


def detect(tree: Tree, source: bytes, restrictions: RestrictionTable) -> list[Violation]:
    """Find uses of restricted exports in one parsed file.

    Args:
        tree: tree-sitter tree of ``source``
        source: Raw file content the tree was parsed from
        restrictions: Restriction table for the run

    Returns:
        Violations ordered by source position
    """
    context = DetectionContext(source=source, restrictions=restrictions)

    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        kind = _NODE_KINDS.get(node.type)
        if kind is not None:
            _HANDLERS[kind](node, context)
        stack.extend(reversed(node.named_children))

    return sorted(context.violations, key=lambda v: (v.line, v.column))


def analyze_source(
    source: bytes, file_path: str, restrictions: RestrictionTable
) -> list[Violation]:
    """Parse ``source`` with the grammar for ``file_path`` and detect violations.

    Raises:
        ValueError: If the file extension is not JavaScript or TypeScript
        MalformedSyntaxError: If the file does not parse cleanly
    """
    parser = LanguageParser.for_path(file_path)
    if parser is None:
        raise ValueError(f"Unsupported file type: {file_path}")

    tree = parser.parse(source)
    ensure_well_formed(tree, source, file_path)
    return detect(tree, source, restrictions)


def _visit_import_statement(node: Node, context: DetectionContext) -> None:
    if _is_type_only(node):
        return

    for child in node.named_children:
        if child.type == "import_require_clause":
            _bind_import_require(child, context)
            return

    source_node = node.child_by_field_name("source")
    if source_node is None or source_node.type != "string":
        return
    module = _string_value(source_node, context)
    restriction = context.restrictions.lookup(module)

    for clause in node.named_children:
        if clause.type != "import_clause":
            continue
        for child in clause.named_children:
            if child.type == "identifier":
                context.bind(context.text(child), module)
            elif child.type == "namespace_import":
                local = _first_child_of_type(child, "identifier")
                if local is not None:
                    context.bind(context.text(local), module)
            elif child.type == "named_imports" and restriction is not None:
                for specifier in child.named_children:
                    if specifier.type != "import_specifier" or _is_type_only(specifier):
                        continue
                    name_node = specifier.child_by_field_name("name")
                    if name_node is None:
                        continue
                    exported = _export_name(name_node, context)
                    if exported in restriction.names:
                        context.report(ViolationKind.DIRECT, exported, module, node)


def _bind_import_require(clause: Node, context: DetectionContext) -> None:
    # import ReactDOM = require('react-dom')
    local = _first_child_of_type(clause, "identifier")
    source_node = clause.child_by_field_name("source") or _first_child_of_type(clause, "string")
    if local is not None and source_node is not None:
        context.bind(context.text(local), _string_value(source_node, context))


def _visit_variable_declarator(node: Node, context: DetectionContext) -> None:
    name_node = node.child_by_field_name("name")
    value_node = node.child_by_field_name("value")
    if name_node is None:
        return

    required = _required_module(value_node, context) if value_node is not None else None

    if name_node.type == "identifier":
        # Any redeclaration replaces the binding, module or not
        if required is not None:
            context.bind(context.text(name_node), required)
        else:
            context.unbind(context.text(name_node))
        if value_node is not None and value_node.type == "member_expression":
            _check_required_member(node, value_node, context)
        return

    if name_node.type != "object_pattern" or value_node is None:
        return

    if required is not None:
        module = required
    elif value_node.type == "identifier":
        module = context.bindings.get(context.text(value_node))
    else:
        return
    if module is None:
        return

    restriction = context.restrictions.lookup(module)
    if restriction is None:
        return

    for prop in name_node.named_children:
        key = _pattern_key(prop, context)
        if key is not None and key in restriction.names:
            context.report(ViolationKind.DESTRUCTURE, key, module, prop)


def _check_required_member(declarator: Node, value_node: Node, context: DetectionContext) -> None:
    # const findDOMNode = require('react-dom').findDOMNode
    object_node = value_node.child_by_field_name("object")
    property_node = value_node.child_by_field_name("property")
    if object_node is None or property_node is None:
        return
    if property_node.type != "property_identifier":
        return

    module = _required_module(object_node, context)
    if module is None:
        return

    name = context.text(property_node)
    if context.restrictions.is_restricted(module, name):
        context.report(ViolationKind.DIRECT, name, module, declarator)


def _visit_member_expression(node: Node, context: DetectionContext) -> None:
    object_node = node.child_by_field_name("object")
    property_node = node.child_by_field_name("property")
    if object_node is None or property_node is None:
        return
    if object_node.type != "identifier" or property_node.type != "property_identifier":
        return

    module = context.bindings.get(context.text(object_node))
    if module is None:
        return

    name = context.text(property_node)
    if context.restrictions.is_restricted(module, name):
        context.report(ViolationKind.NAMESPACE_ACCESS, name, module, node)


_HANDLERS: dict[NodeKind, Callable[[Node, DetectionContext], None]] = {
    NodeKind.IMPORT_STATEMENT: _visit_import_statement,
    NodeKind.VARIABLE_DECLARATOR: _visit_variable_declarator,
    NodeKind.MEMBER_EXPRESSION: _visit_member_expression,
}


def _required_module(node: Node, context: DetectionContext) -> str | None:
    """Module name of a ``require('m')`` call, or None for anything else."""
    if node.type != "call_expression":
        return None

    function_node = node.child_by_field_name("function")
    arguments_node = node.child_by_field_name("arguments")
    if function_node is None or arguments_node is None:
        return None
    if function_node.type != "identifier" or context.text(function_node) != "require":
        return None

    arguments = [a for a in arguments_node.named_children if a.type != "comment"]
    if len(arguments) != 1 or arguments[0].type != "string":
        return None

    return _string_value(arguments[0], context) or None


def _pattern_key(prop: Node, context: DetectionContext) -> str | None:
    """Property name destructured by one entry of an object pattern."""
    if prop.type == "shorthand_property_identifier_pattern":
        return context.text(prop)

    if prop.type == "pair_pattern":
        key = prop.child_by_field_name("key")
        if key is None:
            return None
        if key.type == "property_identifier":
            return context.text(key)
        if key.type == "string":
            return _string_value(key, context)
        return None

    if prop.type == "object_assignment_pattern":
        left = prop.child_by_field_name("left")
        if left is not None and left.type == "shorthand_property_identifier_pattern":
            return context.text(left)

    return None


def _is_type_only(node: Node) -> bool:
    """True for TypeScript `import type` statements and `type` specifiers."""
    return any(not child.is_named and child.type in ("type", "typeof") for child in node.children)


def _export_name(node: Node, context: DetectionContext) -> str:
    if node.type == "string":
        return _string_value(node, context)
    return context.text(node)


def _string_value(node: Node, context: DetectionContext) -> str:
    text = context.text(node)
    if len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]:
        return text[1:-1]
    return text


def _first_child_of_type(node: Node, node_type: str) -> Node | None:
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None
