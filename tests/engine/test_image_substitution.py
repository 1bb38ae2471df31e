"""
Tests for ImageSubstitutionEngine.

These build small in-memory packages and check the body text, the
relationship table and the media parts after a part is processed.
"""

import pytest

from image_keeper.engine.image_resizer import ContainedImageResizer
from image_keeper.engine.image_substitution import ImageSubstitutionEngine
from image_keeper.exceptions import InvalidExtentError, RelationNotFoundError, XMLParseError
from image_keeper.media.image_probe import ImageDimensions
from image_keeper.models.drawing import BoxSize, Drawing
from image_keeper.models.package import Part
from image_keeper.models.relationship import RelationshipTable
from image_keeper.models.substitution import SubstitutionState
from image_keeper.utils.xml_utils import parse_xml, qn
from tests.builders import document_xml, drawing_xml, make_docx, rels_xml, textbox_xml

RELS = "word/_rels/document.xml.rels"


def _drawings(part):
    return Drawing.find_all(parse_xml(part.data))


def _table(package, name=RELS):
    return RelationshipTable.parse(name, package.get(name).data)


class TestProcessPart:
    """Test processing whole parts."""

    def test_repeated_placeholder(self):
        """Test three instances of one placeholder get distinct relations."""
        body = document_xml(
            drawing_xml("http://img/a.png"),
            drawing_xml("http://img/b.png"),
            drawing_xml("http://img/c.png"),
        )
        package = make_docx(body)
        part = package.get("word/document.xml")

        result = ImageSubstitutionEngine(package).process_part(part)

        assert result.substituted == 3
        assert result.duplicated == 2
        assert result.errors == []

        drawings = _drawings(part)
        assert [d.picture.description for d in drawings] == ["rId5", "rId5_2", "rId5_3"]
        assert [d.picture.blip_fill.embed for d in drawings] == ["rId5", "rId5_2", "rId5_3"]

        table = _table(package)
        assert table.ids() == ["rId5", "rId5_2", "rId5_3"]
        assert package.get("word/media/image1.png").data == "http://img/a.png"
        assert package.get("word/media/image1_2.png").data == "http://img/b.png"
        assert package.get("word/media/image1_3.png").data == "http://img/c.png"

    def test_relation_ids_are_unique(self):
        body = document_xml(*[drawing_xml(f"http://img/{i}.png") for i in range(5)])
        package = make_docx(body)

        ImageSubstitutionEngine(package).process_part(package.get("word/document.xml"))

        ids = _table(package).ids()
        assert len(ids) == len(set(ids)) == 5

    def test_interleaved_relations(self):
        body = document_xml(
            drawing_xml("A", rel_id="rId5"),
            drawing_xml("B", rel_id="rId6"),
            drawing_xml("C", rel_id="rId5"),
        )
        package = make_docx(body, rels={"rId5": "media/image1.png", "rId6": "media/image2.png"})
        part = package.get("word/document.xml")

        ImageSubstitutionEngine(package, scrub_payload_text=False).process_part(part)

        assert [d.picture.blip_fill.embed for d in _drawings(part)] == ["rId5", "rId6", "rId5_2"]
        assert package.get("word/media/image2.png").data == "B"
        assert package.get("word/media/image1_2.png").data == "C"

    def test_qrcode_placeholder(self):
        package = make_docx(document_xml(drawing_xml("hello world", qrcode="true")))
        part = package.get("word/document.xml")

        ImageSubstitutionEngine(package).process_part(part)

        assert package.get("word/media/image1.png").data == "qrcode://hello world"
        assert _drawings(part)[0].picture.description == "rId5"

    def test_contained_placeholder(self, landscape_png):
        payload = f"file://{landscape_png}"
        package = make_docx(document_xml(drawing_xml(payload, contains="true", cx=4000, cy=4000)))
        part = package.get("word/document.xml")

        ImageSubstitutionEngine(package).process_part(part)

        (drawing,) = _drawings(part)
        assert drawing.anchor.extent == BoxSize(4000, 2000)
        assert drawing.picture.shape_extent == BoxSize(4000, 2000)

    def test_not_contained_keeps_extents(self, landscape_png):
        package = make_docx(document_xml(drawing_xml(f"file://{landscape_png}")))
        part = package.get("word/document.xml")

        ImageSubstitutionEngine(package).process_part(part)

        assert _drawings(part)[0].anchor.extent == BoxSize(4000, 4000)

    def test_static_and_empty_images_ignored(self):
        body = document_xml(
            drawing_xml("http://img/a.png", dynamic="false"),
            drawing_xml(""),
        )
        package = make_docx(body)
        part = package.get("word/document.xml")

        result = ImageSubstitutionEngine(package).process_part(part)

        assert result.substituted == 0
        assert part.data == body
        assert package.get("word/media/image1.png").data != "http://img/a.png"

    def test_payload_text_scrubbed(self):
        payload = "http://img/a.png?w=1&h=2"
        body = document_xml(drawing_xml(payload), extra_text=f"see {payload.replace('&', '&amp;')}")
        package = make_docx(body)
        part = package.get("word/document.xml")

        ImageSubstitutionEngine(package).process_part(part)

        assert "img/a.png" not in part.data
        assert "see rId5" in part.data

    def test_scrub_dropped_when_payload_matches_markup(self):
        """Test a one-letter payload does not rewrite prefixes and namespaces."""
        package = make_docx(document_xml(drawing_xml("w", qrcode="true")))
        part = package.get("word/document.xml")

        result = ImageSubstitutionEngine(package).process_part(part)

        assert result.substituted == 1
        root = parse_xml(part.data)
        assert root.tag == qn("w:document")
        (drawing,) = Drawing.find_all(root)
        assert drawing.picture.description == "rId5"
        assert package.get("word/media/image1.png").data == "qrcode://w"

    def test_textbox_picture_substituted_once(self):
        """Test a picture inside a text box is handled by its own drawing only."""
        package = make_docx(document_xml(textbox_xml(drawing_xml("http://img/a.png", wrapper="inline"))))
        part = package.get("word/document.xml")

        result = ImageSubstitutionEngine(package).process_part(part)

        assert result.substituted == 1
        assert result.duplicated == 0
        assert _table(package).ids() == ["rId5"]
        assert package.get("word/media/image1.png").data == "http://img/a.png"
        outer, inner = _drawings(part)
        assert outer.picture is None
        assert inner.picture.description == "rId5"

    def test_invalid_extent_restored(self):
        body = document_xml(
            drawing_xml("http://img/bad.png", contains="true", cx="40x0"),
            drawing_xml("http://img/good.png"),
        )
        package = make_docx(body)
        part = package.get("word/document.xml")
        resizer = ContainedImageResizer(prober=lambda payload: ImageDimensions(800, 400))

        result = ImageSubstitutionEngine(package, resizer=resizer).process_part(part)

        assert result.substituted == 1
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], InvalidExtentError)
        bad, good = _drawings(part)
        assert bad.picture.description == "http://img/bad.png"
        assert good.picture.description == "rId5"
        assert package.get("word/media/image1.png").data == "http://img/good.png"

    def test_payload_text_kept_without_scrub(self):
        body = document_xml(drawing_xml("http://img/a.png"), extra_text="see http://img/a.png")
        package = make_docx(body)
        part = package.get("word/document.xml")

        ImageSubstitutionEngine(package, scrub_payload_text=False).process_part(part)

        assert "see http://img/a.png" in part.data

    def test_failed_drawing_restored(self):
        """Test a broken drawing is rolled back while its siblings are substituted."""
        body = document_xml(
            drawing_xml("http://img/bad.png", rel_id="rId9", contains="true"),
            drawing_xml("http://img/good.png"),
        )
        package = make_docx(body)
        part = package.get("word/document.xml")
        resizer = ContainedImageResizer(prober=lambda payload: ImageDimensions(800, 400))

        result = ImageSubstitutionEngine(package, resizer=resizer).process_part(part)

        assert result.substituted == 1
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], RelationNotFoundError)

        bad, good = _drawings(part)
        assert bad.picture.description == "http://img/bad.png"
        assert bad.picture.blip_fill.embed == "rId9"
        assert bad.anchor.extent == BoxSize(4000, 4000)
        assert good.picture.description == "rId5"
        assert _table(package).ids() == ["rId5"]

    def test_missing_media_recorded(self):
        package = make_docx(document_xml(drawing_xml("http://img/a.png")), media=[])
        part = package.get("word/document.xml")
        before = part.data

        result = ImageSubstitutionEngine(package).process_part(part)

        assert result.substituted == 0
        assert len(result.errors) == 1
        assert part.data == before

    def test_header_part(self):
        header = Part("word/header1.xml", document_xml(drawing_xml("H1"), drawing_xml("H2"), root="hdr"))
        package = make_docx(
            document_xml(),
            extra_parts=[
                header,
                Part("word/_rels/header1.xml.rels", rels_xml({"rId5": "media/image3.png"})),
                Part("word/media/image3.png", b""),
            ],
        )

        result = ImageSubstitutionEngine(package).process_part(header)

        assert result.substituted == 2
        assert _table(package, "word/_rels/header1.xml.rels").ids() == ["rId5", "rId5_2"]
        assert package.get("word/media/image3_2.png").data == "H2"
        assert _table(package).ids() == ["rId5"]

    def test_invalid_xml(self):
        package = make_docx("<w:document")

        with pytest.raises(XMLParseError):
            ImageSubstitutionEngine(package).process_part(package.get("word/document.xml"))


class TestSubstitute:
    """Test substituting a single drawing."""

    def test_state_threads_through(self):
        package = make_docx(document_xml(drawing_xml("A"), drawing_xml("B")))
        part = package.get("word/document.xml")
        engine = ImageSubstitutionEngine(package)
        first, second = Drawing.find_all(parse_xml(part.data))

        state = engine.substitute(part, first, "A", SubstitutionState())
        state = engine.substitute(part, second, "B", state)

        assert state.counters["rId5"] == 2
        assert second.picture.description == "rId5_2"
