"""
LTR Report Node
===============
Output-agnostic tree node populated by both reporters before serialization.

Author: DvidMakesThings
"""

from typing import Dict, List, Optional


def escape(text: str, quote: bool = True) -> str:
    """Escape text for XML/HTML content or (with ``quote``) attribute values."""
    text = (text.replace("&", "&amp;")
                .replace("<", "&lt;")
                .replace(">", "&gt;"))
    if quote:
        text = text.replace('"', "&quot;").replace("'", "&apos;")
    return text


class ReportNode:
    """A tag with ordered attributes, optional text content and ordered children.

    Args:
        tag (str): Element name.
        attributes (Optional[Dict[str, str]]): Initial attributes; insertion
            order is kept when serializing.
    """

    def __init__(self, tag: str, attributes: Optional[Dict[str, str]] = None):
        self.tag = tag
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.content: Optional[str] = None
        self.children: List["ReportNode"] = []

    def create_node(self, tag: str, attributes: Optional[Dict[str, str]] = None) -> "ReportNode":
        """Create a child node, append it and return it."""
        node = ReportNode(tag, attributes)
        self.children.append(node)
        return node

    def append(self, node: "ReportNode") -> "ReportNode":
        self.children.append(node)
        return node

    def set_content(self, content: Optional[str]) -> None:
        """Set the node's text content (written before any children)."""
        self.content = content

    def find_all(self, tag: str) -> List["ReportNode"]:
        """Return all descendants with the given tag, document order."""
        found: List["ReportNode"] = []
        for child in self.children:
            if child.tag == tag:
                found.append(child)
            found.extend(child.find_all(tag))
        return found

    def to_string(self, short_empty: bool = True) -> str:
        """Serialize the subtree.

        Args:
            short_empty (bool): Write nodes without content or children as
                ``<tag/>``. HTML output turns this off, since ``<td/>`` is
                not an empty cell there.
        """
        attrs = "".join(f' {name}="{escape(str(value))}"' for name, value in self.attributes.items())
        inner = escape(self.content, quote=False) if self.content else ""
        inner += "".join(child.to_string(short_empty) for child in self.children)

        if not inner and short_empty:
            return f"<{self.tag}{attrs}/>"
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ReportNode({self.tag!r}, {self.attributes!r}, children={len(self.children)})"
