"""Serialization of the document tree to indented CSDL text."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Iterable

from lxml import etree

from csdl_render.namespaces import EDM, EDMX, EDMX_VERSION, ENVELOPE_NSMAP, SCHEMA_NSMAP

if TYPE_CHECKING:
    from csdl_render.document import Element

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

DEFAULT_INDENT = "  "
DEFAULT_NEWLINE = "\r\n"

_TAG_BOUNDARY = re.compile(r">\s*<")
_CLOSING_TAG = re.compile(r"^/\w")
_OPENING_TAG = re.compile(r"^\w(?:[^>]*[^/])?$")

# Characters outside the XML 1.0 Char production
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

REPLACEMENT_CHARACTER = "\ufffd"


def xml_safe(value: str) -> str:
    """Replace characters XML 1.0 cannot carry with U+FFFD."""
    safe, count = _XML_ILLEGAL.subn(REPLACEMENT_CHARACTER, value)
    if count:
        logger.warning("Replaced %d character(s) not allowed in XML in %r", count, value)
    return safe


def _append(parent: etree._Element | None, node: Element, nsmap: dict | None = None) -> etree._Element:
    tag = f"{{{EDM}}}{node.tag}"
    if parent is None:
        xml = etree.Element(tag, nsmap=nsmap)
    else:
        xml = etree.SubElement(parent, tag, nsmap=nsmap)
    for name, value in node.attributes:
        xml.set(name, xml_safe(value))
    for child in node.children:
        _append(xml, child)
    return xml


def to_xml_element(schema: Element, parent: etree._Element | None = None) -> etree._Element:
    """Convert a Schema element tree to lxml, in the EDM default namespace."""
    return _append(parent, schema, nsmap=SCHEMA_NSMAP)


def build_envelope(schemas: Iterable[Element]) -> etree._Element:
    """Wrap Schema elements in the ``edmx:Edmx`` / ``edmx:DataServices`` envelope."""
    root = etree.Element(f"{{{EDMX}}}Edmx", nsmap=ENVELOPE_NSMAP)
    root.set("Version", EDMX_VERSION)
    data_services = etree.SubElement(root, f"{{{EDMX}}}DataServices")
    for schema in schemas:
        to_xml_element(schema, data_services)
    return root


def to_markup(schemas: Iterable[Element]) -> str:
    """Serialize Schema elements to compact markup, XML declaration included."""
    body = etree.tostring(build_envelope(schemas), encoding="unicode")
    return XML_DECLARATION + body


def format_xml(xml: str, indent: str = DEFAULT_INDENT, newline: str = DEFAULT_NEWLINE) -> str:
    """Put one tag per line and indent by nesting depth.

    Text content between tags is not supported; the input is expected to be
    element-only markup such as :func:`to_markup` produces.
    """
    nodes = _TAG_BOUNDARY.split(xml.strip())
    if not nodes or nodes == [""]:
        return ""
    nodes[0] = nodes[0][1:] if nodes[0].startswith("<") else nodes[0]
    nodes[-1] = nodes[-1][:-1] if nodes[-1].endswith(">") else nodes[-1]

    lines: list[str] = []
    depth = 0
    for node in nodes:
        if _CLOSING_TAG.match(node):
            depth = max(depth - 1, 0)
        lines.append(f"{indent * depth}<{node}>")
        if _OPENING_TAG.match(node):
            depth += 1
    return newline.join(lines)


def serialize(
    schemas: Iterable[Element],
    indent: str = DEFAULT_INDENT,
    newline: str = DEFAULT_NEWLINE,
) -> str:
    """Serialize Schema elements to the final document text."""
    return format_xml(to_markup(schemas), indent=indent, newline=newline)
