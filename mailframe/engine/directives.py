"""
Name directives.

A node's name may start with one literal, case-sensitive directive prefix:

- ``[table]``: re-synthesize the container's text as a data table
- ``[link] <url>``: wrap the fragment in a hyperlink placeholder
- ``[gif] <id>``: reference an externally hosted animated image
- ``[transparent]``: rasterize without the node's own fills
"""

from __future__ import annotations

import re
from typing import Optional

TABLE = "[table]"
LINK = "[link]"
GIF = "[gif]"
TRANSPARENT = "[transparent]"

_LINK_URL = re.compile(r"\[link\]\s*(.*)")


def has_directive(name: str, directive: str) -> bool:
    return bool(name) and name.startswith(directive)


def link_url(name: str) -> Optional[str]:
    """
    URL carried by a ``[link]`` name.

    Returns:
        The trimmed text after the prefix, ``"#"`` when it is blank, or
        ``None`` when the name carries no link directive.
    """
    if not has_directive(name, LINK):
        return None
    match = _LINK_URL.match(name)
    url = match.group(1).strip() if match else ""
    return url or "#"


def gif_id(name: str) -> Optional[str]:
    """Asset id carried by a ``[gif]`` name, or ``None``."""
    if not has_directive(name, GIF):
        return None
    return name[len(GIF):].strip()
