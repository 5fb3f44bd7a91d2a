"""Convert vCloud XML documents into nested dictionaries.

The resulting shape is the one the mock backend produces, so callers can treat
real and mock bodies alike:

* the root element is dropped; its attributes and children form the top level,
* attribute names use ``_`` instead of ``:`` (``ovf:required`` -> ``ovf_required``)
  and namespace declarations show up as ``xmlns``/``xmlns_<prefix>`` attributes,
* element names keep their prefix (``ovf:Info``),
* text-only elements collapse to their stripped text, empty elements to ``""``
  and ``i:nil="true"`` elements to ``None``,
* repeated sibling elements become a list in document order.
"""

from __future__ import annotations

from typing import Any, Dict

from lxml import etree

from .logging_config import log

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

_PARSER = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_comments=True,
    remove_pis=True,
)


def to_hash(content: bytes | str) -> Dict[str, Any]:
    """Parse an XML document into a nested dictionary.

    Args:
        content: Raw XML response body.

    Returns:
        Dict[str, Any]: Attributes and children of the root element. An empty
        body yields an empty dictionary.

    Raises:
        ValueError: If the content is not well-formed XML.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    if not content.strip():
        return {}
    try:
        root = etree.fromstring(content, parser=_PARSER)
    except etree.XMLSyntaxError as exc:
        raise ValueError(f"Invalid XML document: {exc}") from exc

    log.debug("Parsing XML document with root <%s>", _element_name(root))
    body = _attributes(root, {})
    for child in _child_elements(root):
        _add_child(body, _element_name(child), _element_value(child, root.nsmap))
    return body


def _element_value(el: etree._Element, parent_nsmap: Dict) -> Any:
    """Return the converted value of a non-root element.

    Args:
        el: Element to convert.
        parent_nsmap: Namespace map in scope at the parent element.

    Returns:
        Any: Text, ``""``, ``None`` or a dictionary of attributes and children.
    """
    data = _attributes(el, parent_nsmap)
    children = _child_elements(el)
    for child in children:
        _add_child(data, _element_name(child), _element_value(child, el.nsmap))

    text = _text_content(el)
    if not data and not text:
        return ""
    if not children and _is_nil(data):
        return None
    if text:
        return text
    return data


def _add_child(data: Dict[str, Any], name: str, value: Any) -> None:
    """Store ``value`` under ``name``, turning repeated names into a list."""
    if name not in data:
        data[name] = value
        return
    existing = data[name]
    if not isinstance(existing, list):
        data[name] = [existing]
    data[name].append(value)


def _attributes(el: etree._Element, parent_nsmap: Dict) -> Dict[str, Any]:
    """Return namespace declarations and attributes of ``el`` as a dictionary.

    Args:
        el: Source element.
        parent_nsmap: Namespace map in scope at the parent element; only
            declarations new on ``el`` are reported.

    Returns:
        Dict[str, Any]: Attribute names with ``:`` replaced by ``_``.
    """
    attrs: Dict[str, Any] = {}
    for prefix, uri in el.nsmap.items():
        if parent_nsmap.get(prefix) == uri:
            continue
        attrs["xmlns" if prefix is None else f"xmlns_{prefix}"] = uri

    for key, value in el.attrib.items():
        qname = etree.QName(key)
        prefix = _prefix_for(el, qname.namespace)
        attrs[f"{prefix}_{qname.localname}" if prefix else qname.localname] = value
    return attrs


def _prefix_for(el: etree._Element, namespace: str | None) -> str | None:
    """Return the prefix bound to ``namespace`` at ``el``."""
    if namespace is None:
        return None
    if namespace == XML_NAMESPACE:
        return "xml"
    for prefix, uri in el.nsmap.items():
        if uri == namespace and prefix is not None:
            return prefix
    return None


def _element_name(el: etree._Element) -> str:
    localname = etree.QName(el).localname
    return f"{el.prefix}:{localname}" if el.prefix else localname


def _child_elements(el: etree._Element) -> list:
    return [child for child in el if isinstance(child.tag, str)]


def _text_content(el: etree._Element) -> str:
    """Return the stripped character data of ``el``, including text between children."""
    parts = [el.text or ""]
    parts.extend(child.tail or "" for child in el)
    return "".join(parts).strip()


def _is_nil(attrs: Dict[str, Any]) -> bool:
    """Return True when the only real attribute is an ``*:nil="true"`` marker."""
    plain = {k: v for k, v in attrs.items() if not k.startswith("xmlns")}
    if len(plain) != 1:
        return False
    key, value = next(iter(plain.items()))
    return key.endswith("_nil") and value == "true"
