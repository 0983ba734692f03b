"""Fuzzy and semantic catalog search for anime, manga and quiz catalogs."""

__version__ = "0.1.0"
