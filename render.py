import random
from typing import List, Tuple

from models import Rect
from tilemap import OccupancySource

def _color(idx: int) -> str:
    rng = random.Random(idx * 7919 + 17)
    r = rng.randint(40, 200)
    g = rng.randint(40, 200)
    b = rng.randint(40, 200)
    return f"rgb({r},{g},{b})"

def render_result(source: OccupancySource, rects: List[Rect], scale: int = 24) -> Tuple[str, str]:
    Wc, Hc = source.width, source.height
    svg_w = Wc * scale + 2
    svg_h = Hc * scale + 2

    def _top(y: int, h: int) -> int:
        # y grows upward in cell space, downward in SVG
        return (Hc - y - h) * scale + 1

    tiles = []
    for x, y in source.occupied_cells():
        tiles.append(
            f'<rect x="{x * scale + 1}" y="{_top(y, 1)}" width="{scale}" height="{scale}" '
            f'fill="#d8d8d8" stroke="#bbbbbb" stroke-width="1"/>'
        )

    boxes = []
    legend = []
    for i, r in enumerate(rects, start=1):
        x = r.x * scale + 1
        y = _top(r.y, r.h)
        w = r.w * scale
        h = r.h * scale
        fill = _color(i)
        boxes.append(
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" fill="{fill}" fill-opacity="0.55" stroke="black" stroke-width="1"/>'
            f'<text x="{x+3}" y="{y+12}" font-size="10" fill="black">{i}</text>'
        )
        legend.append(
            f"<li><span class='swatch' style='background:{fill}'></span>"
            f"#{i} ({r.x},{r.y}) {r.w}×{r.h}</li>"
        )

    frame = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{frame}{"".join(tiles)}{"".join(boxes)}</svg>'
    )
    return svg, "".join(legend)
