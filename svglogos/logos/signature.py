"""SVG fingerprints for repository deduplication.

Two levels:
- content_hash: SHA-256 over whitespace-normalized, lowercased markup.
  Catches byte-level duplicates served from different URLs.
- visual signature: element counts + colour set. Fuzzier, used among
  rows for the same term when hashes differ.
"""

import hashlib
import logging
import re
import xml.etree.ElementTree as ET
from typing import Optional

logger = logging.getLogger(__name__)

SHAPE_TAGS = ("path", "circle", "rect", "ellipse", "line", "polyline", "polygon")

ELEMENT_TOLERANCE = 0.2  # 20% of the larger total
MIN_COLOR_OVERLAP = 0.7


def normalize_svg_content(svg_content: str) -> str:
    """Collapse whitespace between tags, trim, lowercase."""
    normalized = re.sub(r">\s+<", "><", svg_content)
    return normalized.strip().lower()


def content_hash(svg_content: str) -> str:
    return hashlib.sha256(normalize_svg_content(svg_content).encode("utf-8")).hexdigest()


def _local_name(tag: str) -> str:
    # "{http://www.w3.org/2000/svg}path" -> "path"
    return tag.rsplit("}", 1)[-1]


def extract_visual_signature(svg_content: str) -> Optional[dict]:
    """
    Extract a coarse visual fingerprint.

    Returns:
        {"viewBox", "width", "height", "elements": {<shape>: n, "total": n},
         "colors": [...]} or None if the markup has no <svg> root
    """
    try:
        root = ET.fromstring(svg_content)
    except ET.ParseError as e:
        logger.debug(f"Visual signature: unparseable SVG ({e})")
        return None

    if _local_name(root.tag) != "svg":
        svg = next((el for el in root.iter() if _local_name(el.tag) == "svg"), None)
        if svg is None:
            return None
        root = svg

    counts = {tag: 0 for tag in SHAPE_TAGS}
    colors: list[str] = []
    seen_colors: set[str] = set()

    for element in root.iter():
        name = _local_name(element.tag)
        if name in counts:
            counts[name] += 1
        for attr in ("fill", "stroke"):
            value = element.get(attr)
            if value and value != "none" and value not in seen_colors:
                seen_colors.add(value)
                colors.append(value)

    counts["total"] = sum(counts[tag] for tag in SHAPE_TAGS)

    return {
        "viewBox": root.get("viewBox"),
        "width": root.get("width"),
        "height": root.get("height"),
        "elements": counts,
        "colors": colors,
    }


def signatures_similar(sig1: Optional[dict], sig2: Optional[dict]) -> bool:
    """Shape totals within 20% of the larger one AND >= 70% colour overlap."""
    if not sig1 or not sig2:
        return False

    total1 = sig1.get("elements", {}).get("total", 0)
    total2 = sig2.get("elements", {}).get("total", 0)
    element_diff = abs(total1 - total2)
    element_tolerance = max(total1, total2) * ELEMENT_TOLERANCE

    colors1 = set(sig1.get("colors") or [])
    colors2 = set(sig2.get("colors") or [])
    largest = max(len(colors1), len(colors2))
    if largest == 0:
        # Neither declares a colour: nothing to disagree on
        color_similarity = 1.0
    else:
        color_similarity = len(colors1 & colors2) / largest

    return element_diff <= element_tolerance and color_similarity >= MIN_COLOR_OVERLAP
