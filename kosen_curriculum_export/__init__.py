"""Scrape KOSEN Web Syllabus curricula into per-grade JSON files."""

__version__ = "0.1.0"
