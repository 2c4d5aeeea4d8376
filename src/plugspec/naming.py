"""Convert spec identifiers to Go identifiers.

Spec names are lower-case words joined by underscores or dashes
(``post_message``, ``ctx-channel``). Generated Go code wants exported
UpperCamelCase names (``PostMessage``, ``CtxChannel``).

Examples:
  post_message   -> PostMessage
  things_n_such  -> ThingsNSuch
  ctx-channel    -> CtxChannel
  PostMessage    -> PostMessage   (already normalised)
"""

from __future__ import annotations

import re

# Any run of characters that cannot appear in a Go identifier splits words.
_WORD_SPLIT_RE = re.compile(r"[^0-9A-Za-z]+")


def _split_words(name: str) -> list[str]:
    """Split a name on every non-alphanumeric run, dropping empty pieces."""
    return [w for w in _WORD_SPLIT_RE.split(name) if w]


def upper_camel_case(name: str) -> str:
    """Return *name* as an UpperCamelCase identifier.

    Only the first letter of each word is changed, so feeding the result
    back in returns it unchanged.
    """
    return "".join(w[0].upper() + w[1:] for w in _split_words(name))


def enum_constant_suffix(literal_text: str) -> str:
    """Normalise an enum literal's text for use in a constant name.

    ``"high"`` becomes ``High``, ``["a","b"]`` becomes ``AB``. Literals
    with nothing alphanumeric in them (``""``, ``[]``) become ``Empty``.
    """
    return upper_camel_case(literal_text) or "Empty"
