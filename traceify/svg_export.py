"""SVG document assembly for traced outlines."""
from typing import Iterable, List



def format_number(x: float, precision: int) -> str:
    """
    Format number with given precision.

    Args:
        x: Number to format
        precision: Decimal places

    Returns:
        Formatted string
    """
    formatted = f"{x:.{precision}f}"
    # Remove trailing zeros and decimal point if not needed
    if '.' in formatted:
        formatted = formatted.rstrip('0').rstrip('.')
    if formatted == '-0':
        formatted = '0'
    return formatted


def curve_to_path_data(curve, precision: int = 2) -> str:
    """
    Convert one closed potrace curve to SVG path commands.

    Corner segments become two line-to commands through the corner
    vertex, smooth segments a cubic bezier.

    Args:
        curve: Traced curve with `start_point` and segments
        precision: Decimal precision

    Returns:
        Path data string, closed with Z
    """
    fmt = lambda p: f"{format_number(p.x, precision)},{format_number(p.y, precision)}"

    cmds = [f"M{fmt(curve.start_point)}"]
    for segment in curve.segments:
        if segment.is_corner:
            cmds.append(f"L{fmt(segment.c)} L{fmt(segment.end_point)}")
        else:
            cmds.append(
                f"C{fmt(segment.c1)} {fmt(segment.c2)} {fmt(segment.end_point)}"
            )
    cmds.append("Z")

    return ' '.join(cmds)


def generate_svg(
    curves: Iterable,
    width: int,
    height: int,
    precision: int = 2,
    fill: str = "#000000"
) -> str:
    """
    Generate an SVG document from traced curves.

    All curves share one path with even-odd filling, so holes nested
    inside shapes stay open.

    Args:
        curves: Traced curves
        width: Image width
        height: Image height
        precision: Decimal precision
        fill: Fill color of the shapes

    Returns:
        Complete SVG string
    """
    parts: List[str] = [
        curve_to_path_data(curve, precision)
        for curve in curves
        if curve.start_point is not None
    ]

    if parts:
        path_data = ' '.join(parts)
        svg_content = f'<path d="{path_data}" fill="{fill}" fill-rule="evenodd"/>'
    else:
        svg_content = ''

    svg = f'''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" version="1.1" viewBox="0 0 {width} {height}" width="{width}" height="{height}">
  {svg_content}
</svg>'''

    return svg


def save_svg(
    svg_string: str,
    output_path: str
) -> None:
    """
    Save SVG string to file.

    Args:
        svg_string: SVG content
        output_path: Output file path
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(svg_string)
