"""Codec XML do protocolo de callback (parse com limites e serialização).

O formato da plataforma é raso: <xml><Campo>valor</Campo>...</xml>. Alguns
eventos trazem blocos aninhados (ex.: SendPicsInfo/PicList/item); nesses casos
o valor é um dict, e filhos repetidos viram lista. Filhos chamados "item" sempre
viram lista, espelhando o formato de Articles/PicList.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from xml.etree import ElementTree as ET

from utils.errors import FormatError

XML_MAX_PAYLOAD_BYTES = 256 * 1024
XML_MAX_DEPTH = 6
XML_MAX_FIELDS = 200
LIST_ITEM_TAG = "item"


def parse_xml(raw: bytes | str | None) -> dict[str, Any]:
    """Converte XML do callback em dict.

    Args:
        raw: Corpo bruto (bytes ou str)

    Raises:
        FormatError: XML mal-formado, com DOCTYPE ou fora dos limites

    Returns:
        Mapeamento campo -> valor (vazio para corpo vazio)
    """
    if raw is None:
        return {}
    data = raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)
    if not data.strip():
        return {}

    if len(data) > XML_MAX_PAYLOAD_BYTES:
        raise FormatError("xml_payload_too_large")
    # Entidades externas/expansão não fazem parte do protocolo
    if b"<!DOCTYPE" in data.upper():
        raise FormatError("xml_doctype_not_allowed")

    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise FormatError("invalid_xml") from exc

    counter = [0]
    parsed = _element_value(root, depth=1, counter=counter)
    return parsed if isinstance(parsed, dict) else {}


def _element_value(element: ET.Element, depth: int, counter: list[int]) -> Any:
    if depth > XML_MAX_DEPTH:
        raise FormatError("xml_too_deep")

    children = list(element)
    if not children:
        return element.text or ""

    counter[0] += len(children)
    if counter[0] > XML_MAX_FIELDS:
        raise FormatError("xml_too_many_fields")

    if all(child.tag == LIST_ITEM_TAG for child in children):
        return [_element_value(child, depth + 1, counter) for child in children]

    result: dict[str, Any] = {}
    for child in children:
        value = _element_value(child, depth + 1, counter)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = existing = [existing]
            existing.append(value)
        else:
            result[child.tag] = value
    return result


def build_xml(fields: Mapping[str, Any], root: str = "xml") -> str:
    """Serializa um mapeamento no XML da plataforma.

    Strings vão em CDATA; números vão como texto puro; dicts viram blocos
    aninhados e listas viram <item> repetidos.
    """
    return f"<{root}>{_serialize_fields(fields)}</{root}>"


def _serialize_fields(fields: Mapping[str, Any]) -> str:
    return "".join(f"<{name}>{_serialize_value(value)}</{name}>" for name, value in fields.items())


def _serialize_value(value: Any) -> str:
    if isinstance(value, Mapping):
        return _serialize_fields(value)
    if isinstance(value, (list, tuple)):
        return "".join(
            f"<{LIST_ITEM_TAG}>{_serialize_value(item)}</{LIST_ITEM_TAG}>" for item in value
        )
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return cdata("" if value is None else str(value))


def cdata(text: str) -> str:
    """Envolve texto em CDATA, quebrando ocorrências de ']]>'."""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"
