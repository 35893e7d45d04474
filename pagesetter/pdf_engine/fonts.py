"""
Font management for the layout engine.

This module handles:
- Font file discovery and registration (DejaVu, for the bullet and checkbox glyphs)
- Fallback to the PDF base-14 fonts when DejaVu is unavailable
- Mapping inline formats to a concrete font name
"""

import os
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from pagesetter.document.models import TextFormat


logger = logging.getLogger(__name__)

# pdfmetrics keeps a process-wide registry; batch renders share it
_registration_lock = threading.Lock()


@dataclass(frozen=True)
class FontSystem:
    """Concrete font names for each style role"""
    regular: str
    bold: str
    italic: str
    bold_italic: str
    code: str
    code_bold: str
    unicode_glyphs: bool = False  # True when the fonts carry ● ◦ ▪ ☑ ☐

    def for_formats(self, formats: Iterable[TextFormat]) -> str:
        """Pick the font for a set of inline formats. Code wins over bold/italic."""
        formats = set(formats)
        if TextFormat.CODE in formats:
            return self.code_bold if TextFormat.BOLD in formats else self.code
        if TextFormat.BOLD in formats and TextFormat.ITALIC in formats:
            return self.bold_italic
        if TextFormat.BOLD in formats:
            return self.bold
        if TextFormat.ITALIC in formats:
            return self.italic
        return self.regular

    @classmethod
    def builtin(cls, family: str = 'sans') -> 'FontSystem':
        """Base-14 fonts, always available in ReportLab"""
        if family == 'serif':
            return cls('Times-Roman', 'Times-Bold', 'Times-Italic', 'Times-BoldItalic',
                       'Courier', 'Courier-Bold')
        return cls('Helvetica', 'Helvetica-Bold', 'Helvetica-Oblique', 'Helvetica-BoldOblique',
                   'Courier', 'Courier-Bold')

    @classmethod
    def dejavu(cls, family: str = 'sans') -> 'FontSystem':
        """DejaVu names as registered by FontManager"""
        if family == 'serif':
            return cls('DejaVuSerif', 'DejaVuSerif-Bold', 'DejaVuSerif-Italic',
                       'DejaVuSerif-BoldItalic', 'DejaVuSansMono', 'DejaVuSansMono-Bold',
                       unicode_glyphs=True)
        return cls('DejaVuSans', 'DejaVuSans-Bold', 'DejaVuSans-Oblique',
                   'DejaVuSans-BoldOblique', 'DejaVuSansMono', 'DejaVuSansMono-Bold',
                   unicode_glyphs=True)


class FontManager:
    """
    Manages font registration for ReportLab.

    Handles:
    - Font file discovery across multiple paths
    - TTF font registration with ReportLab
    - Resolving a template font family to a FontSystem
    """

    # Default search paths for fonts
    DEFAULT_SEARCH_PATHS = [
        # System paths (Linux)
        '/usr/share/fonts/truetype/dejavu/',
        '/usr/share/fonts/dejavu/',
        '/usr/share/fonts/TTF/',
        '/usr/local/share/fonts/',

        # User paths
        os.path.expanduser('~/.fonts/'),
        os.path.expanduser('~/.local/share/fonts/'),

        # macOS paths
        '/Library/Fonts/',
        os.path.expanduser('~/Library/Fonts/'),

        # Project paths
        './assets/fonts/',
        str(Path(__file__).parent.parent.parent / 'assets' / 'fonts'),
    ]

    FAMILY_FILES = {
        'sans': {
            'DejaVuSans': 'DejaVuSans.ttf',
            'DejaVuSans-Bold': 'DejaVuSans-Bold.ttf',
            'DejaVuSans-Oblique': 'DejaVuSans-Oblique.ttf',
            'DejaVuSans-BoldOblique': 'DejaVuSans-BoldOblique.ttf',
        },
        'serif': {
            'DejaVuSerif': 'DejaVuSerif.ttf',
            'DejaVuSerif-Bold': 'DejaVuSerif-Bold.ttf',
            'DejaVuSerif-Italic': 'DejaVuSerif-Italic.ttf',
            'DejaVuSerif-BoldItalic': 'DejaVuSerif-BoldItalic.ttf',
        },
    }

    MONO_FILES = {
        'DejaVuSansMono': 'DejaVuSansMono.ttf',
        'DejaVuSansMono-Bold': 'DejaVuSansMono-Bold.ttf',
    }

    def __init__(self, additional_paths: Optional[List[str]] = None):
        """
        Initialize FontManager.

        Args:
            additional_paths: Extra paths searched before the defaults
        """
        self.search_paths = list(additional_paths or []) + list(self.DEFAULT_SEARCH_PATHS)
        self._registered_fonts: Dict[str, str] = {}
        self._font_cache: Dict[str, Optional[str]] = {}

    def find_font_file(self, filename: str) -> Optional[str]:
        """
        Find a font file in search paths.

        Returns:
            Full path to font file, or None if not found
        """
        if filename in self._font_cache:
            return self._font_cache[filename]

        found = None
        for search_path in self.search_paths:
            path = Path(search_path) / filename
            if path.exists():
                found = str(path)
                break

        self._font_cache[filename] = found
        if not found:
            logger.debug(f"Font file not found: {filename}")
        return found

    def register_font(self, font_name: str, font_file: str) -> bool:
        """
        Register a single font with ReportLab.

        Args:
            font_name: Name to register (e.g., 'DejaVuSans')
            font_file: Font filename (e.g., 'DejaVuSans.ttf')

        Returns:
            True if the font is available under font_name
        """
        if font_name in self._registered_fonts:
            return True

        with _registration_lock:
            if font_name in pdfmetrics.getRegisteredFontNames():
                self._registered_fonts[font_name] = font_file
                return True

            font_path = self.find_font_file(font_file)
            if not font_path:
                return False

            try:
                pdfmetrics.registerFont(TTFont(font_name, font_path))
            except (TTFError, OSError) as e:
                logger.error(f"Failed to register font {font_name}: {e}")
                return False

        self._registered_fonts[font_name] = font_path
        logger.debug(f"Registered font: {font_name} from {font_path}")
        return True

    def load_font_system(self, family: str = 'sans', use_dejavu: bool = True) -> FontSystem:
        """
        Register the DejaVu family and return its FontSystem.

        Falls back to the base-14 fonts when any file of the family is
        missing, so a document never mixes DejaVu and Helvetica metrics.
        """
        family = family if family in self.FAMILY_FILES else 'sans'
        if not use_dejavu:
            return FontSystem.builtin(family)

        wanted = dict(self.FAMILY_FILES[family])
        wanted.update(self.MONO_FILES)
        if all(self.register_font(name, filename) for name, filename in wanted.items()):
            return FontSystem.dejavu(family)

        logger.warning("DejaVu fonts not found, using fallback fonts")
        return FontSystem.builtin(family)
