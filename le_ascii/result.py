"""
Conversion Result Container

Provides the TransformResult dataclass holding a glyph grid together with
the geometry it was laid out with and the painted image, with support for
terminal display, HTML/text export and PNG saving.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
import html

import numpy as np
from PIL import Image

from .exporter import BACKGROUND_COLOR, FOREGROUND_COLOR, export_image
from .geometry import Geometry
from .mapper import GlyphGrid
from .settings import AsciiSettings


@dataclass
class TransformResult:
    """
    Container for one image-to-glyph conversion.

    Attributes:
        grid: The glyph grid
        geometry: Grid layout and cell sizes
        settings: Settings the grid was produced with
        image: The painted output image
        source_image: The image the conversion started from
        metadata: Generation parameters and timings
    """
    grid: GlyphGrid
    geometry: Geometry
    settings: AsciiSettings
    image: Optional[Image.Image] = None
    source_image: Optional[Image.Image] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.grid.to_text()

    @property
    def width(self) -> int:
        """Width in characters."""
        return self.grid.cols

    @property
    def height(self) -> int:
        """Height in lines."""
        return self.grid.rows

    def display(self, max_width: Optional[int] = None):
        """
        Print the glyph grid to the terminal.

        Args:
            max_width: Maximum width to display (truncates if needed)
        """
        if max_width:
            for line in self.grid.lines():
                print(line[:max_width])
        else:
            print(self.text)

    def save(self, path: str, format: str = "auto") -> str:
        """
        Save the result to a file.

        Args:
            path: Output file path
            format: "txt", "html", "png", or "auto" (detect from extension)

        Returns:
            The path written
        """
        if format == "auto":
            lowered = path.lower()
            if lowered.endswith(('.html', '.htm')):
                format = "html"
            elif lowered.endswith('.png'):
                format = "png"
            else:
                format = "txt"

        if format == "png":
            if self.image is None:
                raise ValueError("No rendered image to save; convert with render_image=True")
            return export_image(self.image, path)

        content = self.to_html() if format == "html" else self.text
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def to_html(
        self,
        font_family: str = "'Space Mono', Menlo, Monaco, 'Courier New', monospace",
        bg_color: str = BACKGROUND_COLOR,
        fg_color: str = FOREGROUND_COLOR,
        title: str = "LE_ASCII",
    ) -> str:
        """
        Convert the glyph grid to a styled HTML page.

        The font size and line height follow the geometry so the page lays
        glyphs out on the same cell grid as the PNG export.
        """
        escaped_text = html.escape(self.text)

        meta_html = ""
        if self.metadata:
            meta_items = [
                f"<li><strong>{html.escape(str(key))}:</strong> {html.escape(str(value))}</li>"
                for key, value in self.metadata.items()
            ]
            meta_html = f"""
        <div class="metadata">
            <ul>{''.join(meta_items)}</ul>
        </div>
"""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>
        body {{
            background-color: {bg_color};
            color: {fg_color};
            font-family: {font_family};
            font-size: {self.geometry.font_size}px;
            line-height: {self.geometry.cell_height}px;
            padding: 20px;
            margin: 0;
        }}
        pre {{
            margin: 0;
            white-space: pre;
            overflow-x: auto;
        }}
        .metadata {{
            margin-top: 20px;
            padding-top: 20px;
            border-top: 1px solid #444;
            font-family: sans-serif;
            font-size: 12px;
            line-height: 1.4;
        }}
        .metadata ul {{
            list-style: none;
            padding: 0;
        }}
    </style>
</head>
<body>
    <pre>{escaped_text}</pre>
{meta_html}
</body>
</html>"""

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the glyph grid."""
        mask = self.grid.paint_mask
        painted = int(mask.sum())
        unique_glyphs = np.unique(self.grid.chars[mask]) if painted else []

        return {
            'width': self.width,
            'height': self.height,
            'total_cells': self.geometry.cell_count,
            'painted_cells': painted,
            'unique_glyphs': len(unique_glyphs),
            'coverage': painted / self.geometry.cell_count,
            'output_size': self.geometry.output_size,
            'font_size': self.geometry.font_size,
        }

    def __repr__(self) -> str:
        return f"TransformResult(width={self.width}, height={self.height}, style={self.settings.char_set_mode!r})"

    def __str__(self) -> str:
        return self.text


def create_result(
    grid: GlyphGrid,
    geometry: Geometry,
    settings: AsciiSettings,
    image: Optional[Image.Image] = None,
    source_image: Optional[Image.Image] = None,
    prompt: Optional[str] = None,
    **extra_metadata
) -> TransformResult:
    """
    Factory function to create a TransformResult with standard metadata.

    Args:
        grid: Glyph grid
        geometry: Grid geometry
        settings: Settings used
        image: Painted output image
        source_image: Source image
        prompt: Generation prompt (if the source was generated)
        **extra_metadata: Additional metadata

    Returns:
        Configured TransformResult
    """
    metadata = {
        'generated_at': datetime.now().isoformat(),
        'style': settings.char_set_mode,
        'grid': f"{geometry.cols}x{geometry.rows}",
    }

    if prompt:
        metadata['prompt'] = prompt

    metadata.update(extra_metadata)

    return TransformResult(
        grid=grid,
        geometry=geometry,
        settings=settings,
        image=image,
        source_image=source_image,
        metadata=metadata,
    )
