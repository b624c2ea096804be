"""CLI entry point for sun-path chart generation.

Edit the lat/lng/year variables at the top, then run:
    uv run python src/sunpathdome/sunchart.py
"""

import logging

from sunpathdome.compute import run
from sunpathdome.renderers.static import save_static_chart

logging.basicConfig(level=logging.INFO)

lat = 43.4643  # Waterloo, ON
lng = -80.5204
year = 2024

sun_path = run(lat, lng, year)
path = save_static_chart(sun_path)
print(f"Saved: {path}")
