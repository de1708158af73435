"""JSON serialization/deserialization for the EspañolScript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Each node becomes an object with a
``"type"`` key naming its class plus one key per field, source positions
included, so a program can be parsed once and executed later with
``python -m espanolscript --ast``.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict

from .ast import Node, NODE_TYPES


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (int, float, str, bool)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(item) for item in node]
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"ast_to_obj: unsupported value {node!r}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(item) for item in obj]
    if isinstance(obj, dict):
        kind = obj.get("type")
        cls = NODE_TYPES.get(kind)
        if cls is None:
            raise ValueError(f"ast_from_obj: unknown node type {kind!r}")
        kwargs = {k: ast_from_obj(v) for k, v in obj.items() if k != "type"}
        return cls(**kwargs)
    raise TypeError(f"ast_from_obj: unsupported value {obj!r}")
