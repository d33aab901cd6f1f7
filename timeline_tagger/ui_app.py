"""Local tag preview UI (no credentials displayed).

Run:
  cd timeline_tagger
  streamlit run ui_app.py

Notes:
- Read-only: tags are computed for display here; writing them is run_tag_backfill.py's job.
- It never prints DATABASE_URL; it only checks whether it is set.
"""

from __future__ import annotations

import os

import streamlit as st

from settings import load_settings_from_env
from tagger import extract_tags
from timeline import display_tags, event_types, filter_events, format_date, truncate_description

SAMPLES = [
    "The president resigned amid the corruption scandal and the parliament was dissolved.",
    "A peace treaty was signed yesterday.",
    "The prime minister resigned after the general election.",
    "A controversial referendum on regional autonomy was held.",
]


st.set_page_config(page_title="Timeline Tag Preview", layout="wide")

st.title("Timeline Tag Preview")
st.caption("Tags are heuristic display labels (max 3)")

st.subheader("Try a description")
sample = st.selectbox("Sample", ["(custom)"] + SAMPLES)
text = st.text_area("Description", value="" if sample == "(custom)" else sample, height=120)

if st.button("Extract tags"):
    tags = extract_tags(text)
    if tags:
        st.success(" · ".join(tags))
    else:
        st.info("Description too short: no tags")

st.divider()

st.subheader("Timeline events (Postgres)")
settings = load_settings_from_env()
st.write(f"DATABASE_URL: {'✅ set' if os.getenv('DATABASE_URL') else '❌ missing'}")

if not settings.database_url:
    st.info("DATABASE_URL is not set; the events table cannot be shown.")
else:
    country_id = st.number_input("Country id", min_value=1, value=settings.country_id or 1, step=1)
    try:
        import pandas as pd

        from db_pg import connect, fetch_timeline_events

        with connect(settings.database_url) as conn:
            events = fetch_timeline_events(conn, country_id=int(country_id), limit=settings.batch_limit)

        types = event_types(events)
        chosen = st.selectbox("Filter by", ["All Events"] + types)
        shown = filter_events(events, None if chosen == "All Events" else chosen)

        df = pd.DataFrame(
            [
                {
                    "date": format_date(e.date),
                    "type": e.event_type,
                    "title": e.title,
                    "description": truncate_description(e.description),
                    "shown_tags": ", ".join(display_tags(e)),
                    "computed_tags": ", ".join(extract_tags(e.description)),
                }
                for e in shown
            ]
        )
        st.write(f"{len(shown)} of {len(events)} events")
        st.dataframe(df, use_container_width=True)

    except Exception as e:
        st.error(f"DB read failed: {e}")
