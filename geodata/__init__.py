"""Bundled map data drawn on the globe."""

from pathlib import Path

# Coarse outlines of the continents and major islands, a few dozen points each
WORLD_CONTINENTS = Path(__file__).with_name("world_continents.geojson")
