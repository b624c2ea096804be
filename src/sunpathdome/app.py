"""SunPathDome — Streamlit app showing the yearly sun path over a location."""

import datetime
import math

import streamlit as st

from sunpathdome.compute import SunPathCache
from sunpathdome.models import HourLine
from sunpathdome.projector import current_position
from sunpathdome.renderers.plotly_3d import render_dome_figure
from sunpathdome.solar import SkyfieldSolarModel

st.set_page_config(
    page_title="SunPathDome",
    page_icon="☀",
    layout="wide",
    initial_sidebar_state="expanded",
)

# --- Session state initialization ---

if "cache" not in st.session_state:
    st.session_state.cache = SunPathCache()
# Downloads de421.bsp into resources/ on first use
if "solar_model" not in st.session_state:
    st.session_state.solar_model = SkyfieldSolarModel()

_SAMPLE_LOCATIONS: dict[str, tuple[float, float]] = {
    "Waterloo, ON": (43.4643, -80.5204),
    "Sydney": (-33.8688, 151.2093),
    "Tromsø": (69.6492, 18.9553),
    "Quito": (-0.1807, -78.4678),
    "Seoul": (37.5665, 126.978),
}

with st.sidebar:
    sample = st.selectbox("Location", list(_SAMPLE_LOCATIONS), index=0)
    default_lat, default_lng = _SAMPLE_LOCATIONS[sample]
    lat = st.number_input("Latitude", -90.0, 90.0, default_lat, format="%.4f")
    lng = st.number_input("Longitude", -180.0, 180.0, default_lng, format="%.4f")
    year = int(
        st.number_input("Year", 1900, 2100, datetime.date.today().year, step=1)
    )

# Recomputed only when location or year changes; the cache owns the results
sun_path = st.session_state.cache.get(lat, lng, year)


@st.fragment(run_every=datetime.timedelta(minutes=1))
def _dome() -> None:
    now = datetime.datetime.now(datetime.timezone.utc)
    sun = current_position(lat, lng, now, model=st.session_state.solar_model)
    st.plotly_chart(render_dome_figure(sun_path, sun=sun), use_container_width=True)
    st.caption(
        f"Sun now: altitude {math.degrees(sun.altitude):.1f}°, "
        f"azimuth {math.degrees(sun.azimuth):.1f}°"
    )


_dome()

tz_text = sun_path.timezone_id or "unknown (local mean solar time)"
st.markdown(f"**Timezone:** {tz_text}")
if sun_path.transitions:
    st.markdown(
        "**DST transitions:** "
        + ", ".join(
            f"{tr.month}/{tr.day} ({'+' if tr.spring_forward else ''}{tr.offset_change_hours:g}h)"
            for tr in sun_path.transitions
        )
    )
hour_groups = {line.hour for line in sun_path.lines if isinstance(line, HourLine)}
st.caption(f"{len(sun_path.lines)} lines, {len(hour_groups)} hour lines")
