"""Helpers for walking xmltodict output.

xmltodict returns a dict for an element that appears once and a list
for one that repeats, and a plain string, a dict with ``#text``, or
None for leaf text. These helpers flatten those shapes so callers can
read nested replies without type checks at every step.
"""

from typing import Any


def strip_namespace(path: list, key: str, value: Any) -> tuple[str, Any] | None:
    """xmltodict postprocessor: drop namespaces from names and namespace declarations.

    With ``process_namespaces=True`` element names arrive as
    ``"http://fedex.com/ws/rate/v6:RateReply"``; only the local part is kept.

    Args:
        path: Element path (unused, required by the postprocessor contract).
        key: Element or attribute name.
        value: Parsed value.

    Returns:
        (local_name, value), or None to drop xmlns declarations.
    """
    is_attribute = key.startswith("@")
    name = key[1:] if is_attribute else key
    if is_attribute and name.split(":")[0] == "xmlns":
        return None
    name = name.rsplit(":", 1)[-1]
    return ("@" + name if is_attribute else name), value


def as_list(node: Any) -> list[dict]:
    """Return dict nodes as a list, whether given one dict, a list, or nothing."""
    if isinstance(node, dict):
        return [node]
    if isinstance(node, list):
        return [n for n in node if isinstance(n, dict)]
    return []


def find_node(node: Any, *path: str) -> Any:
    """Follow a path of element names, taking the first item of repeated elements.

    Args:
        node: Starting dict (or list, or None).
        *path: Element names to descend through.

    Returns:
        The node at the end of the path, or None if any step is missing.
    """
    for key in path:
        if isinstance(node, list):
            node = node[0] if node else None
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def node_text(node: Any) -> str:
    """Return an element's text content, stripped; empty string when absent."""
    if isinstance(node, list):
        node = node[0] if node else None
    if isinstance(node, dict):
        node = node.get("#text")
    if node is None:
        return ""
    return str(node).strip()
