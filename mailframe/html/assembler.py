"""
Document assembler.

Wraps fragments (absolute mode) or the compatibility container (table
mode) in the e-mail document shell: head metadata, the Office settings
block, reset styles and the narrow-viewport rules.
"""

from __future__ import annotations

from html import escape
from typing import Iterable, List, Optional

from ..config import ExportConfig
from ..models.fragment import BackgroundSpec, PositionedFragment
from ..renderers.render_utils import PRESENTATION_TABLE
from ..utils.units import js_round

OFFICE_SETTINGS = (
    "<!--[if gte mso 9]><xml><o:OfficeDocumentSettings><o:AllowPNG/>"
    "<o:PixelsPerInch>96</o:PixelsPerInch></o:OfficeDocumentSettings></xml><![endif]-->"
)

BASE_STYLES = [
    "body{margin:0;padding:0;background-color:transparent;}",
    "table{border-collapse:collapse;mso-table-lspace:0pt;mso-table-rspace:0pt;}",
    "td{padding:0;vertical-align:top;}",
    "img{-ms-interpolation-mode:bicubic;border:0;display:block;outline:none;text-decoration:none;height:auto;}",
]

EMAIL_CONTAINER_STYLES = [
    ".email-container span{line-height:1.2 !important;}",
    ".email-container td{padding-bottom:5px !important;vertical-align:top !important;text-align:inherit !important;}",
    ".email-container a{display:block !important;text-decoration:none !important;pointer-events:auto !important;}",
    ".email-container{border:1px solid #dddddd !important;box-sizing:border-box;}",
    ".email-container td, .email-container table{text-align:inherit !important;vertical-align:inherit !important;}",
]


def vml_background_open(width: int, height: int, background: BackgroundSpec) -> str:
    """Opening of the Outlook VML rectangle replicating the background."""
    return (
        '<!--[if gte mso 9]><v:rect xmlns:v="urn:schemas-microsoft-com:vml" fill="true" stroke="false" '
        f'style="width:{width}px;height:{height}px;">'
        f'<v:fill type="frame" src="{escape(background.image_url)}" color="{background.bgcolor()}"/>'
        '<v:textbox inset="0,0,0,0"><![endif]-->'
    )


VML_BACKGROUND_CLOSE = "<!--[if gte mso 9]></v:textbox></v:rect><![endif]-->"


def background_cell_style(background: BackgroundSpec, extra: Iterable[str] = ()) -> str:
    """Inline background declarations of the outer cell."""
    declarations = list(extra)
    declarations.append(f"background-color:{background.bgcolor()};")
    if background.image_url:
        declarations.extend([
            f"background-image:url({background.image_url});",
            "background-position:center center;",
            "background-repeat:no-repeat;",
            "background-size:cover;",
        ])
    return " ".join(declarations)


def outlook_wrapper(width: int, body: str) -> str:
    """Fixed-width Outlook table around ``body``, centered for every client."""
    return "\n".join([
        "<center>",
        f'<!--[if mso]>{PRESENTATION_TABLE} width="{width}"><tr><td><![endif]-->',
        body,
        "<!--[if mso]></td></tr></table><![endif]-->",
        "</center>",
    ])


class DocumentAssembler:
    """Build the document shells around rendered content."""

    def __init__(self, config: Optional[ExportConfig] = None):
        self.config = config or ExportConfig()

    def positioned_canvas(self, fragments: Iterable[PositionedFragment], width: float, height: float) -> str:
        """Relatively positioned canvas holding the fragments in walk order."""
        markup = "\n".join(fragment.markup for fragment in fragments)
        return f'<div style="position:relative; width:{js_round(width)}px; height:{js_round(height)}px;">{markup}</div>'

    def absolute_document(self, fragments: Iterable[PositionedFragment], width: float, height: float,
                          background: BackgroundSpec) -> str:
        """Absolute-mode document: the canvas inside one background cell."""
        w, h = js_round(width), js_round(height)
        cell_attrs = f'background="{escape(background.image_url)}" bgcolor="{background.bgcolor()}" width="{w}" height="{h}" valign="top"'
        table = "\n".join([
            f'{PRESENTATION_TABLE} width="{w}" style="width:{w}px; height:{h}px;">',
            f'<tr><td {cell_attrs} style="{background_cell_style(background)}">',
            vml_background_open(w, h, background),
            self.positioned_canvas(fragments, w, h),
            VML_BACKGROUND_CLOSE,
            "</td></tr>",
            "</table>",
        ])
        return self._document(outlook_wrapper(w, table), BASE_STYLES)

    def email_document(self, container: str, width: float) -> str:
        """Table-mode document around the compatibility container."""
        return self._document(outlook_wrapper(js_round(width), container), BASE_STYLES + EMAIL_CONTAINER_STYLES)

    # ------------------------------------------------------------------
    # Shell
    # ------------------------------------------------------------------
    def _document(self, body: str, styles: List[str]) -> str:
        lang = self.config.html_lang or "en"
        return "\n".join([
            "<!DOCTYPE html>",
            f'<html lang="{lang}" dir="ltr">',
            "<head>",
            self._head(styles),
            "</head>",
            '<body style="margin:0; padding:0; background-color:transparent;">',
            body,
            "</body>",
            "</html>",
        ])

    def _head(self, styles: List[str]) -> str:
        title = escape(self.config.title or "Mailer")
        parts = [
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            '<meta name="x-apple-disable-message-reformatting">',
            f"<title>{title}</title>",
            OFFICE_SETTINGS,
            "<style>",
            *styles,
            self._responsive_styles(),
            "</style>",
        ]
        return "\n".join(parts)

    def _responsive_styles(self) -> str:
        return "\n".join([
            f"@media screen and (max-width:{self.config.mobile_breakpoint}px){{",
            "    .email-container td{padding:0 10px !important;text-align:center !important;}",
            "    td{text-align:center !important;}",
            "    img{width:100% !important;height:auto !important;}",
            "}",
        ])
