"""
Test the presentation object model
"""

import pytest

from odpwriter.models import (
    Chart,
    ChartType,
    DocumentProperties,
    Group,
    Image,
    MemoryImage,
    Presentation,
    RichText,
    Series,
    ShapeType,
    Table,
    mime_type_for,
    px_to_cm,
    shape_from_dict,
)


class TestShapes:

    def test_capabilities(self):
        assert Image(path="a.png").is_drawing
        assert not Image(path="a.png").is_table
        assert Table().is_table and not Table().is_drawing
        assert Group().is_group
        assert not Chart().is_drawing
        assert not RichText().is_drawing

    def test_identity_comparison(self):
        assert MemoryImage(data=b"x") != MemoryImage(data=b"x")

    def test_extensions_and_mime(self):
        assert Image(path="photos/Cat.JPG").extension == "jpg"
        assert Image(path="photos/Cat.JPG").mime_type == "image/jpeg"
        assert MemoryImage(image_mime_type="image/gif").extension == "gif"
        assert mime_type_for(".PNG") == "image/png"
        assert mime_type_for("unknown") == "application/octet-stream"

    def test_px_to_cm(self):
        assert px_to_cm(96) == 2.54
        assert px_to_cm(0) == 0

    def test_chart_categories_first_seen_order(self):
        chart = Chart(series=[
            Series("a", {"x": 1.0, "y": 2.0}),
            Series("b", {"z": 3.0, "x": 4.0}),
        ])
        assert chart.categories == ["x", "y", "z"]

    def test_table_column_count(self):
        assert Table(rows=[["a"], ["b", "c", "d"]]).column_count == 3
        assert Table().column_count == 0


class TestDictForms:

    def test_shape_from_dict_dispatch(self):
        shape = shape_from_dict({"type": "image", "path": "a.png", "width": 10})
        assert isinstance(shape, Image)
        assert shape.width == 10
        assert shape.shape_type == ShapeType.IMAGE

    def test_unknown_shape_type(self):
        with pytest.raises(ValueError, match="Unknown shape type"):
            shape_from_dict({"type": "hologram"})

    def test_text_shorthand(self):
        shape = shape_from_dict({"type": "text", "text": "one\ntwo"})
        assert shape.paragraphs == ["one", "two"]

    def test_series_accepts_pairs(self):
        series = Series.from_dict({"name": "s", "values": [["Q1", 1], ["Q2", "2.5"]]})
        assert series.values == {"Q1": 1.0, "Q2": 2.5}

    def test_memory_image_base64(self):
        image = MemoryImage(data=b"\x00\xffbinary", image_mime_type="image/png")
        restored = MemoryImage.from_dict(image.to_dict())
        assert restored.data == image.data

    def test_presentation_from_dict(self):
        deck = Presentation.from_dict({
            "properties": {"title": "Deck", "creator": "Ops"},
            "layout": {"width": 1024, "height": 768},
            "slides": [
                {"name": "One", "notes": "hi", "shapes": [
                    {"type": "group", "shapes": [{"type": "table", "rows": [[1, 2]]}]},
                    {"type": "chart", "chart_type": "pie", "series": [{"name": "s", "values": {"a": 1}}]},
                ]},
            ],
        })

        assert deck.slide_count == 1
        assert deck.properties.title == "Deck"
        assert deck.layout.width == 1024
        group, chart = deck.get_slide(0).shapes
        assert group.shapes[0].rows == [["1", "2"]]
        assert chart.chart_type == ChartType.PIE
        assert deck.thumbnail_path is None

    def test_null_properties_become_empty(self):
        props = DocumentProperties.from_dict({"title": None, "creator": "Ops"})
        assert props.title == ""
        assert props.creator == "Ops"

        deck = Presentation.from_dict({"properties": None, "layout": None})
        assert deck.properties.title == ""
        assert deck.slide_count == 0

    def test_create_slide_names(self):
        deck = Presentation()
        deck.create_slide()
        deck.create_slide("Summary")
        assert [s.name for s in deck.slides] == ["Slide 1", "Summary"]

    def test_iter_shapes(self, scenario_presentation):
        indices = [index for index, _ in scenario_presentation.iter_shapes()]
        assert indices == [0, 0, 1]
