"""
Tests for the document assembler.
"""

from mailframe.config import ExportConfig
from mailframe.html import DocumentAssembler
from mailframe.models.fragment import BackgroundSpec, PositionedFragment


def fragment(markup, top=0):
    return PositionedFragment(markup, left=0, top=top, width=10, height=10)


class TestPositionedCanvas:
    def test_canvas_keeps_walk_order(self):
        canvas = DocumentAssembler().positioned_canvas([fragment("<b>2</b>", 50), fragment("<b>1</b>")], 600.4, 399.5)

        assert canvas == '<div style="position:relative; width:600px; height:400px;"><b>2</b>\n<b>1</b></div>'


class TestAbsoluteDocument:
    def test_shell(self):
        html = DocumentAssembler().absolute_document([fragment("<i>x</i>")], 600, 400, BackgroundSpec.none())

        assert html.startswith("<!DOCTYPE html>\n<html lang=\"en\" dir=\"ltr\">")
        assert '<meta charset="UTF-8">' in html
        assert '<meta name="viewport" content="width=device-width, initial-scale=1.0">' in html
        assert '<meta name="x-apple-disable-message-reformatting">' in html
        assert "<title>Mailer</title>" in html
        assert "<o:OfficeDocumentSettings><o:AllowPNG/>" in html
        assert "@media screen and (max-width:480px){" in html
        assert "img{width:100% !important;height:auto !important;}" in html
        assert "<i>x</i>" in html

    def test_background_color(self):
        html = DocumentAssembler().absolute_document([], 600, 400, BackgroundSpec.color("#00ff00"))

        assert 'bgcolor="#00ff00"' in html
        assert "background-color:#00ff00;" in html
        assert 'background=""' in html

    def test_background_image(self):
        html = DocumentAssembler().absolute_document([], 600, 400, BackgroundSpec.image("./images/bg-image-1.png"))

        assert 'background="./images/bg-image-1.png"' in html
        assert "background-size:cover;" in html
        assert 'src="./images/bg-image-1.png"' in html

    def test_centered_fixed_table(self):
        html = DocumentAssembler().absolute_document([], 600, 400, BackgroundSpec.none())

        assert "<center>" in html
        assert 'width="600" style="width:600px; height:400px;"' in html
        assert '<!--[if mso]><table role="presentation" border="0" cellpadding="0" cellspacing="0" width="600">' in html


class TestEmailDocument:
    def test_container_styles_only_in_table_mode(self):
        assembler = DocumentAssembler()

        email = assembler.email_document("<table></table>", 600)
        absolute = assembler.absolute_document([], 600, 400, BackgroundSpec.none())

        assert ".email-container{border:1px solid #dddddd !important;box-sizing:border-box;}" in email
        assert ".email-container" not in absolute.split("@media")[0]

    def test_language_and_breakpoint_from_config(self):
        html = DocumentAssembler(ExportConfig(html_lang="pl", mobile_breakpoint=360)).email_document("", 600)

        assert '<html lang="pl" dir="ltr">' in html
        assert "@media screen and (max-width:360px){" in html
