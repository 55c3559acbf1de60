"""Prompt construction and tool-argument parsing."""

import re
from typing import List, Tuple

from mcp_images.errors import ValidationError

STYLES = {
    "realistic": "photorealistic, high detail, professional photography",
    "cartoon": "cartoon style, vibrant colors, exaggerated features",
    "abstract": "abstract art, geometric shapes, expressive",
    "minimal": "minimalist, clean lines, simple composition",
}

DEFAULT_STYLE = "realistic"

QUALITIES = ("standard", "hd")

_SIZE_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


def style_descriptor(style: str, default: str = DEFAULT_STYLE) -> str:
    """Descriptor for a style key; unknown keys use the default style."""
    return STYLES.get(style.strip().lower(), STYLES[default])


def build_prompt(word: str, style: str, background: str, default_style: str = DEFAULT_STYLE) -> str:
    return f"{background} background, {style_descriptor(style, default_style)}, {word}"


def parse_words(words: str) -> List[str]:
    """Split a comma-separated word list, dropping blanks."""
    word_list = [w.strip() for w in words.split(",")]
    word_list = [w for w in word_list if w]
    if not word_list:
        raise ValidationError("No valid words provided.")
    return word_list


def parse_size(size: str) -> Tuple[int, int]:
    """Parse a 'WxH' size string into positive integers."""
    match = _SIZE_RE.match(size or "")
    if not match:
        raise ValidationError(f"Invalid size '{size}', expected WIDTHxHEIGHT (e.g. 1024x1024)")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ValidationError(f"Invalid size '{size}', dimensions must be positive")
    return width, height


def parse_quality(quality: str) -> str:
    value = (quality or "").strip().lower()
    if value not in QUALITIES:
        raise ValidationError(f"Invalid quality '{quality}'. Valid: {list(QUALITIES)}")
    return value
