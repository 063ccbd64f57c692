"""
Escaping and quoting rules shared by every codec.

Both the flat (per-field) and the nested (subtree) serializers call these, so
each rule exists exactly once.
"""

import json

from typing import Tuple


# Entities left untouched when found in text being XML encoded
KNOWN_ENTITIES = ("&amp;", "&lt;", "&gt;", "&quot;", "&apos;")

_XML_REPLACEMENTS = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def xml_encode(text: str) -> str:
    """
    Encode XML special characters.

    An '&' that already starts one of the five predefined entities (matched
    case-insensitively) is copied unchanged, so encoding is idempotent for
    text that is already encoded.
    """
    if text is None:
        return None
    out = []
    for i, char in enumerate(text):
        if char == "&":
            lookahead = text[i:i + 6].lower()
            if any(lookahead.startswith(entity) for entity in KNOWN_ENTITIES):
                out.append(char)
            else:
                out.append("&amp;")
        else:
            out.append(_XML_REPLACEMENTS.get(char, char))
    return "".join(out)


def escape_separators(text: str, separator: str) -> str:
    """
    Make text safe for one column of a CSV or TSV line.

    Text containing the separator is wrapped in double quotes, after any
    double quote inside it is backslash-escaped. Other text is unchanged.
    """
    if separator in text:
        return '"' + text.replace('"', '\\"') + '"'
    return text


def json_quote(text: str) -> str:
    """Text as a JSON string literal (non-ASCII characters kept as is)."""
    return json.dumps(text, ensure_ascii=False)


def split_attribute(attribute: str) -> Tuple[str, str]:
    """
    Split a harvested name="value" attribute on its first '='.

    Returns:
        (name, value) with the surrounding double quotes removed from value
    """
    name, _, value = attribute.partition("=")
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return name, value
