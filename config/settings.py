#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Page Geometry ==========
    # Preset: A3 | A4 | A5 | Letter | Legal (ignored when page_width/page_height are set)
    page_size: str = "A4"
    page_width: Optional[str] = None  # e.g. "210mm", "8.5in"
    page_height: Optional[str] = None
    orientation: str = "portrait"  # portrait | landscape

    # Margins accept mm, cm, in, pt, px
    margin_top: str = "30mm"
    margin_right: str = "25mm"
    margin_bottom: str = "30mm"
    margin_left: str = "25mm"
    header_height: str = "18mm"
    footer_height: str = "18mm"

    # ========== Running Header / Footer ==========
    document_title: str = "Professional Document"
    branding: str = "Generated by Pagesetter"
    page_number_format: str = "Page {page} of {total}"

    # ========== Styling ==========
    template: str = "professional"  # professional | academic | minimal
    base_font_size: Optional[float] = None  # Overrides the template body size
    register_dejavu_fonts: bool = True  # Needed for bullet/checkbox glyphs

    # ========== Images ==========
    image_fetch_timeout: float = 10.0  # seconds
    image_max_height_mm: float = 180.0
    image_width_ratio: float = 0.85  # of content width

    # ========== Batch ==========
    max_workers: int = 4

    # ========== Logging ==========
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # ========== Directories ==========
    output_dir: Path = BASE_DIR / "data" / "output"
    logs_dir: Path = BASE_DIR / "data" / "logs"
    fonts_dir: Path = BASE_DIR / "assets" / "fonts"

    class Config:
        env_prefix = "PAGESETTER_"
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    @field_validator("orientation")
    @classmethod
    def _check_orientation(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("portrait", "landscape"):
            raise ValueError(f"orientation must be portrait or landscape, got {value!r}")
        return value

    @field_validator("image_width_ratio")
    @classmethod
    def _check_ratio(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError("image_width_ratio must be in (0, 1]")
        return value

    @field_validator("max_workers")
    @classmethod
    def _check_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value

    def format_page_number(self, page: int, total: int) -> str:
        """Footer page label, e.g. 'Page 2 of 5'"""
        return self.page_number_format.replace("{page}", str(page)).replace("{total}", str(total))


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
