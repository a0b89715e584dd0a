"""ABNF reference for RFC 8941 Structured Field Values.

These constants document the textual grammar the parser and serializer
implement.  The implementation is a hand-written recursive-descent parser
(see ``sfv.parser``); the constants are reference material and are what
``sfv grammar`` prints.

Notation (RFC 5234):
    ``=``       rule definition
    ``/``       alternation
    ``*``       zero or more repetitions; ``1*`` one or more
    ``[ ]``     optional
    ``%x``      hexadecimal character code
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Top-level
# ---------------------------------------------------------------------------

GRAMMAR_TOP_LEVEL = """
sf-list       = list-member *( OWS "," OWS list-member )
list-member   = sf-item / inner-list

sf-dictionary = dict-member *( OWS "," OWS dict-member )
dict-member   = member-key ( parameters / ( "=" member-value ))
member-key    = key
member-value  = sf-item / inner-list

sf-item       = bare-item parameters
"""

# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

GRAMMAR_CONTAINERS = """
inner-list    = "(" *SP [ sf-item *( 1*SP sf-item ) *SP ] ")" parameters

parameters    = *( ";" *SP parameter )
parameter     = param-key [ "=" param-value ]
param-key     = key
key           = ( lcalpha / "*" ) *( lcalpha / DIGIT / "_" / "-" / "." / "*" )
lcalpha       = %x61-7A ; a-z
param-value   = bare-item
"""

# ---------------------------------------------------------------------------
# Bare items
# ---------------------------------------------------------------------------

GRAMMAR_BARE_ITEMS = """
bare-item     = sf-integer / sf-decimal / sf-string / sf-token
                / sf-binary / sf-boolean

sf-integer    = ["-"] 1*15DIGIT
sf-decimal    = ["-"] 1*12DIGIT "." 1*3DIGIT

sf-string     = DQUOTE *chr DQUOTE
chr           = unescaped / escaped
unescaped     = %x20-21 / %x23-5B / %x5D-7E
escaped       = "\\" ( DQUOTE / "\\" )

sf-token      = ( ALPHA / "*" ) *( tchar / ":" / "/" )

sf-binary     = ":" *(base64) ":"
base64        = ALPHA / DIGIT / "+" / "/" / "="

sf-boolean    = "?" boolean
boolean       = "0" / "1"
"""

# ---------------------------------------------------------------------------
# Imported core rules
# ---------------------------------------------------------------------------

GRAMMAR_CORE = """
ALPHA         = %x41-5A / %x61-7A   ; A-Z / a-z
DIGIT         = %x30-39             ; 0-9
DQUOTE        = %x22
SP            = %x20
HTAB          = %x09
VCHAR         = %x21-7E
OWS           = *( SP / HTAB )
tchar         = "!" / "#" / "$" / "%" / "&" / "'" / "*"
                / "+" / "-" / "." / "^" / "_" / "`" / "|" / "~"
                / DIGIT / ALPHA
"""

GRAMMAR_SECTIONS: dict[str, str] = {
    "top-level": GRAMMAR_TOP_LEVEL,
    "containers": GRAMMAR_CONTAINERS,
    "bare-items": GRAMMAR_BARE_ITEMS,
    "core": GRAMMAR_CORE,
}


def full_grammar() -> str:
    """Return every grammar section concatenated in reading order."""
    return "\n".join(section.strip() + "\n" for section in GRAMMAR_SECTIONS.values())
