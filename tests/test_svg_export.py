"""Tests for SVG assembly."""
from types import SimpleNamespace
from xml.etree import ElementTree as ET

from traceify.svg_export import curve_to_path_data, format_number, generate_svg, save_svg


def pt(x, y):
    return SimpleNamespace(x=x, y=y)


def corner(c, end):
    return SimpleNamespace(is_corner=True, c=pt(*c), end_point=pt(*end))


def bezier(c1, c2, end):
    return SimpleNamespace(is_corner=False, c1=pt(*c1), c2=pt(*c2), end_point=pt(*end))


def curve(start, segments):
    return SimpleNamespace(start_point=pt(*start), segments=segments)


class TestFormatNumber:
    """Test cases for format_number."""

    def test_trims_zeros(self):
        assert format_number(1.5, 2) == "1.5"
        assert format_number(2.0, 2) == "2"
        assert format_number(0.333333, 2) == "0.33"

    def test_negative_zero(self):
        assert format_number(-0.0001, 2) == "0"


class TestCurveToPathData:
    """Test cases for curve_to_path_data."""

    def test_corner_and_bezier(self):
        """Corners become line pairs, smooth segments cubic curves."""
        c = curve((0, 0), [
            corner((10, 0), (10, 5)),
            bezier((10, 8), (5, 10), (0, 10)),
        ])

        data = curve_to_path_data(c)

        assert data == "M0,0 L10,0 L10,5 C10,8 5,10 0,10 Z"


class TestGenerateSVG:
    """Test cases for generate_svg."""

    def test_valid_document(self):
        """Output parses as SVG with one even-odd path."""
        curves = [
            curve((0, 0), [corner((4, 0), (4, 4)), corner((0, 4), (0, 0))]),
            curve((1, 1), [corner((2, 1), (2, 2)), corner((1, 2), (1, 1))]),
        ]

        svg = generate_svg(curves, 4, 4)

        root = ET.fromstring(svg.encode("utf-8"))
        assert root.tag.endswith("svg")
        assert root.get("viewBox") == "0 0 4 4"
        paths = root.findall(".//{http://www.w3.org/2000/svg}path")
        assert len(paths) == 1
        assert paths[0].get("fill-rule") == "evenodd"
        assert paths[0].get("d").count("M") == 2

    def test_no_curves(self):
        """An empty trace still yields a valid, empty document."""
        svg = generate_svg([], 10, 20)

        root = ET.fromstring(svg.encode("utf-8"))
        assert root.get("width") == "10"
        assert root.findall(".//{http://www.w3.org/2000/svg}path") == []

    def test_save_svg(self, tmp_path):
        path = tmp_path / "out.svg"
        save_svg("<svg/>", str(path))
        assert path.read_text(encoding="utf-8") == "<svg/>"
