"""Scraper package — jar page rendering & field extraction."""

from monojar.scraper.errors import JarParseError
from monojar.scraper.models import JarData, is_valid_jar_url
from monojar.scraper.pipeline import JarParser, parse_jar

__all__ = ["JarParser", "parse_jar", "JarData", "JarParseError", "is_valid_jar_url"]
