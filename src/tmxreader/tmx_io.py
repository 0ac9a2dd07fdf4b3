"""TMX document reading and extraction.

Uses lxml with entity expansion, DTD loading and network access turned
off.  Extraction is positional: the first ``<tuv>`` of a ``<tu>`` is the
source and the second is the target, whatever their ``xml:lang`` says.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator

from lxml import etree

from tmxreader.dates import parse_tmx_date
from tmxreader.errors import (
    AccessError,
    FieldParseError,
    MalformedDocumentError,
    MalformedUnitError,
)
from tmxreader.models import (
    ConfirmationLevel,
    PlainText,
    Tag,
    TextPart,
    TmxHeader,
    TranslationUnit,
)

logger = logging.getLogger(__name__)

XML_NS = "http://www.w3.org/XML/1998/namespace"

DOMAIN_PROP = "x-Domain:SinglePicklist"
CONFIRMATION_LEVEL_PROP = "x-ConfirmationLevel"

# ── Reading ─────────────────────────────────────────────────────


def _make_parser(*, huge_tree: bool = False) -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        dtd_validation=False,
        no_network=True,
        huge_tree=huge_tree,
    )


def _check_entities(tree: etree._ElementTree) -> None:
    """Reject documents that declare or reference custom entities."""
    dtd = tree.docinfo.internalDTD
    if dtd is not None and any(True for _ in dtd.iterentities()):
        raise MalformedDocumentError("entity declarations are not allowed")
    for _ in tree.getroot().iter(etree.Entity):
        raise MalformedDocumentError("entity references are not allowed")


def read_document(path: str | Path, *, huge_tree: bool = False) -> etree._ElementTree:
    """Read a whole TMX file into memory.

    The file is closed before this returns.

    Raises:
        AccessError: If the file cannot be opened or read.
        MalformedDocumentError: On malformed XML, entity declarations,
            a root other than ``<tmx>`` or a missing ``<body>``.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            tree = etree.parse(f, _make_parser(huge_tree=huge_tree))
    except OSError as exc:
        raise AccessError(str(exc)) from exc
    except etree.XMLSyntaxError as exc:
        raise MalformedDocumentError(str(exc)) from exc

    _check_entities(tree)

    root = tree.getroot()
    tag = etree.QName(root).localname
    if tag.lower() != "tmx":
        raise MalformedDocumentError(f"Root element is <{root.tag}>, expected <tmx>")
    if root.find("body") is None:
        raise MalformedDocumentError("TMX file has no <body> element")
    return tree


# ── Helpers ─────────────────────────────────────────────────────


def _attribute(elem: etree._Element | None, name: str) -> str:
    """Case-insensitive attribute lookup; returns "" if not found."""
    if elem is None:
        return ""
    name = name.lower()
    for key, value in elem.attrib.items():
        if key.lower() == name:
            return value
    return ""


def _attribute_name(elem: etree._Element, key: str) -> str:
    """Turn lxml's ``{uri}local`` notation back into ``prefix:local``."""
    if not key.startswith("{"):
        return key
    qname = etree.QName(key)
    if qname.namespace == XML_NS:
        return f"xml:{qname.localname}"
    for prefix, uri in elem.nsmap.items():
        if uri == qname.namespace and prefix:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _inner_text(elem: etree._Element | None) -> str:
    if elem is None:
        return ""
    return "".join(elem.itertext())


def _prop(elem: etree._Element, prop_type: str) -> etree._Element | None:
    for prop in elem.iterfind("prop"):
        if prop.get("type") == prop_type:
            return prop
    return None


def _date(elem: etree._Element, name: str) -> datetime | None:
    value = _attribute(elem, name)
    if not value:
        return None
    parsed = parse_tmx_date(value)
    if parsed is None:
        logger.warning("Ignoring unparseable %s %r", name, value)
    return parsed


# ── Formatted text ──────────────────────────────────────────────


def extract_text_parts(seg: etree._Element) -> tuple[TextPart, ...]:
    """Turn the immediate children of a ``<seg>`` into text parts.

    Text nodes become :class:`PlainText` verbatim; inline elements
    become :class:`Tag` with their attributes in document order.  The
    content of inline elements is not descended into.
    """
    parts: list[TextPart] = []
    if seg.text:
        parts.append(PlainText(seg.text))
    for child in seg:
        if isinstance(child.tag, str):
            parts.append(Tag(
                format_type=etree.QName(child).localname,
                attributes=tuple(
                    (_attribute_name(child, key), value)
                    for key, value in child.attrib.items()
                ),
            ))
        # Comments and processing instructions are skipped, their tail is not
        if child.tail:
            parts.append(PlainText(child.tail))
    return tuple(parts)


# ── Header ──────────────────────────────────────────────────────


def parse_domains(value: str) -> tuple[str, ...]:
    """Split a comma-separated domain list, trimming each entry."""
    return tuple(d.strip() for d in value.split(",") if d.strip())


def extract_header(tree: etree._ElementTree) -> TmxHeader:
    """Build the header of a document read by :func:`read_document`."""
    root = tree.getroot()
    header = root.find("header")

    # Positional: first attribute of the second <tuv> of the first <tu>
    target_language = ""
    second_tuv = root.find("body/tu[1]/tuv[2]")
    if second_tuv is not None and len(second_tuv.attrib):
        target_language = second_tuv.attrib.values()[0]

    if header is None:
        return TmxHeader(target_language=target_language)

    domain_prop = _prop(header, DOMAIN_PROP)
    return TmxHeader(
        source_language=header.get("srclang", ""),
        target_language=target_language,
        domains=parse_domains(_inner_text(domain_prop)),
        creation_date=_date(header, "creationdate"),
        author=_attribute(header, "creationid"),
        xml=etree.tostring(header, encoding="unicode", with_tail=False),
    )


# ── Translation units ───────────────────────────────────────────


def _confirmation_level(tu: etree._Element) -> ConfirmationLevel:
    value = _inner_text(_prop(tu, CONFIRMATION_LEVEL_PROP))
    if not value:
        return ConfirmationLevel.UNSPECIFIED
    try:
        return ConfirmationLevel.from_text(value)
    except FieldParseError as exc:
        logger.warning("Ignoring %s", exc)
        return ConfirmationLevel.UNSPECIFIED


def extract_unit(tu: etree._Element, header: TmxHeader, index: int = 0) -> TranslationUnit:
    """Build one translation unit.

    *index* is the 1-based position of *tu*, used in error messages.

    Raises:
        MalformedUnitError: If the first ``<tuv>`` has no ``<seg>``.
    """
    source = tu.find("tuv[1]/seg")
    if source is None:
        raise MalformedUnitError(index, "no <seg> in the first <tuv>")
    target = tu.find("tuv[2]/seg")

    return TranslationUnit(
        source_language=header.source_language,
        target_language=header.target_language,
        source=extract_text_parts(source),
        target=extract_text_parts(target) if target is not None else None,
        creation_date=_date(tu, "creationdate"),
        creation_author=_attribute(tu, "creationid"),
        change_date=_date(tu, "changedate"),
        change_author=_attribute(tu, "changeid"),
        confirmation_level=_confirmation_level(tu),
        domain=_inner_text(_prop(tu, DOMAIN_PROP)),
    )


def iter_units(tree: etree._ElementTree) -> Iterator[etree._Element]:
    """Yield the ``<tu>`` elements of the body in document order."""
    return tree.getroot().iterfind("body/tu")
