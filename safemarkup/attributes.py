"""Parser for the raw attribute text of a start tag."""

_QUOTES = "\"'"


def parse_attributes(raw: str) -> dict[str, str]:
    """
    Parse ``name=value`` pairs out of a start tag's attribute text.

    Names are lowercased and values trimmed. Quoted values run to the
    matching quote, or to the end of the text if it is never closed.
    Unquoted values end at the next whitespace. Attributes without ``=``
    get an empty value. On duplicate names the last one wins. No
    validation of names or values happens here.

    Args:
        raw: Attribute text following the tag name.

    Returns:
        Mapping of attribute name to value.
    """
    attributes: dict[str, str] = {}
    pos = 0
    length = len(raw)

    while pos < length:
        while pos < length and raw[pos].isspace():
            pos += 1
        if pos >= length:
            break

        name_start = pos
        while pos < length and not raw[pos].isspace() and raw[pos] != "=":
            pos += 1
        name = raw[name_start:pos].lower()

        # Look past whitespace for an "="
        lookahead = pos
        while lookahead < length and raw[lookahead].isspace():
            lookahead += 1

        value = ""
        if lookahead < length and raw[lookahead] == "=":
            pos = lookahead + 1
            while pos < length and raw[pos].isspace():
                pos += 1

            if pos < length and raw[pos] in _QUOTES:
                quote = raw[pos]
                end = raw.find(quote, pos + 1)
                if end == -1:
                    value = raw[pos + 1 :]
                    pos = length
                else:
                    value = raw[pos + 1 : end]
                    pos = end + 1
            else:
                value_start = pos
                while pos < length and not raw[pos].isspace():
                    pos += 1
                value = raw[value_start:pos]

        # A stray "=" yields an empty name and is discarded
        if name:
            attributes[name] = value.strip()

    return attributes
