"""Conversion between metadata XML documents and plain payload mappings.

Payload conventions:
- attributes become keys prefixed with ``@_``; namespace declarations too
  (``@_xmlns`` for the default namespace, ``@_xmlns:xsi`` for prefixed ones)
- an element with neither attributes nor child elements becomes its stripped text
- a child element that occurs once becomes a single value, a repeated one a list
- text next to child elements or attributes is kept under ``#text``

Comments and processing instructions are dropped on decode.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from lxml import etree

if TYPE_CHECKING:
    from collections.abc import Iterator

ATTRIBUTE_PREFIX: Final[str] = "@_"
TEXT_KEY: Final[str] = "#text"
XML_DECLARATION: Final[bytes] = b'<?xml version="1.0" encoding="UTF-8"?>\n'
_XML_NAMESPACE: Final[str] = "http://www.w3.org/XML/1998/namespace"


class XmlDocumentError(ValueError):
    """Raised when a document cannot be decoded or a payload cannot be encoded."""


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_blank_text=True,
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )


def decode(data: bytes) -> dict[str, object]:
    """Decode an XML document into a ``{root_name: value}`` payload."""

    try:
        root = etree.fromstring(data, parser=_parser())
    except etree.XMLSyntaxError as exc:
        raise XmlDocumentError(f"invalid XML: {exc}") from exc
    return {etree.QName(root).localname: _element_value(root, parent_nsmap={})}


def encode(payload: Mapping[str, object]) -> bytes:
    """Encode a ``{root_name: value}`` payload as a pretty-printed UTF-8 document."""

    roots = [(name, value) for name, value in payload.items() if not name.startswith("?")]
    if len(roots) != 1:
        raise XmlDocumentError(f"payload must have exactly one root element, got {len(roots)}")
    name, value = roots[0]
    if isinstance(value, list):
        raise XmlDocumentError(f"root element {name} cannot repeat")
    root = _build_element(None, name, value, default_namespace=None)
    return XML_DECLARATION + etree.tostring(root, encoding="UTF-8", pretty_print=True)


def _element_value(element: etree._Element, *, parent_nsmap: Mapping[str | None, str]) -> object:
    value: dict[str, object] = {}
    for prefix, uri in element.nsmap.items():
        if parent_nsmap.get(prefix) != uri:
            value[_namespace_key(prefix)] = uri
    for key, attribute in element.attrib.items():
        value[ATTRIBUTE_PREFIX + _attribute_name(element, str(key))] = attribute

    children: dict[str, object] = {}
    for child in element:
        if not isinstance(child.tag, str):
            continue
        name = etree.QName(child).localname
        child_value = _element_value(child, parent_nsmap=element.nsmap)
        existing = children.get(name)
        if existing is None:
            children[name] = child_value
        elif isinstance(existing, list):
            existing.append(child_value)
        else:
            children[name] = [existing, child_value]

    text = (element.text or "").strip()
    if not value and not children:
        return text
    if text:
        value[TEXT_KEY] = text
    value.update(children)
    return value


def _namespace_key(prefix: str | None) -> str:
    return f"{ATTRIBUTE_PREFIX}xmlns" if prefix is None else f"{ATTRIBUTE_PREFIX}xmlns:{prefix}"


def _attribute_name(element: etree._Element, key: str) -> str:
    qname = etree.QName(key)
    if qname.namespace is None:
        return qname.localname
    if qname.namespace == _XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in element.nsmap.items():
        if uri == qname.namespace and prefix is not None:
            return f"{prefix}:{qname.localname}"
    raise XmlDocumentError(f"attribute {key} uses an undeclared namespace")


def _build_element(
    parent: etree._Element | None,
    name: str,
    value: object,
    *,
    default_namespace: str | None,
) -> etree._Element:
    nsmap: dict[str | None, str] = {}
    attributes: dict[str, str] = {}
    children: list[tuple[str, object]] = []
    text: str | None = None

    if isinstance(value, Mapping):
        for raw_key, item in value.items():
            key = str(raw_key)
            if key == TEXT_KEY:
                text = _text(item)
            elif key.startswith(ATTRIBUTE_PREFIX):
                attribute = key.removeprefix(ATTRIBUTE_PREFIX)
                if attribute == "xmlns":
                    nsmap[None] = str(item)
                elif attribute.startswith("xmlns:"):
                    nsmap[attribute.removeprefix("xmlns:")] = str(item)
                else:
                    attributes[attribute] = _text(item)
            else:
                children.append((key, item))
    else:
        text = _text(value)

    namespace = nsmap.get(None, default_namespace)
    tag = f"{{{namespace}}}{name}" if namespace else name
    if parent is None:
        element = etree.Element(tag, nsmap=nsmap or None)
    else:
        element = etree.SubElement(parent, tag, nsmap=nsmap or None)

    for attribute, attribute_value in attributes.items():
        element.set(_qualified_attribute(element, attribute), attribute_value)
    if text:
        element.text = text
    for key, item in children:
        for child_value in _repeated(key, item):
            _build_element(element, key, child_value, default_namespace=namespace)
    return element


def _repeated(name: str, item: object) -> Iterator[object]:
    if not isinstance(item, list | tuple):
        yield item
        return
    for child_value in item:
        if isinstance(child_value, list | tuple):
            raise XmlDocumentError(f"element {name} contains a nested list")
        yield child_value


def _qualified_attribute(element: etree._Element, attribute: str) -> str:
    prefix, separator, local = attribute.partition(":")
    if not separator:
        return attribute
    if prefix == "xml":
        return f"{{{_XML_NAMESPACE}}}{local}"
    uri = element.nsmap.get(prefix)
    if uri is None:
        raise XmlDocumentError(f"attribute {attribute} uses an undeclared prefix")
    return f"{{{uri}}}{local}"


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["ATTRIBUTE_PREFIX", "TEXT_KEY", "XmlDocumentError", "decode", "encode"]
