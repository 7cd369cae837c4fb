import logging

import streamlit as st

from cafe_ui.api_client import BACKEND_URL, CafeMapClient
from cafe_ui.layers import LAYER_ID
from cafe_ui.map_controller import CafeMapController, FILTERS, detail_lines, escape_markdown

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Page configuration
st.set_page_config(
    page_title="Kyiv Cafe Map",
    page_icon="☕",
    layout="wide",
    initial_sidebar_state="collapsed"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.2rem;
        color: #6f4e37;
        text-align: center;
        padding: 0.5rem 0;
        font-weight: bold;
    }
    .counter {
        text-align: center;
        font-size: 1.1rem;
        color: #444;
    }
</style>
""", unsafe_allow_html=True)

FILTER_LABELS = {
    "all": "All",
    "new": "🟢 New",
    "visited": "🔵 Visited",
    "disliked": "🔴 Disliked",
}

# Initialize session state
if "controller" not in st.session_state:
    st.session_state.controller = CafeMapController(CafeMapClient(BACKEND_URL))
    with st.spinner("Loading cafes..."):
        st.session_state.controller.load()

controller: CafeMapController = st.session_state.controller

# Header
st.markdown('<div class="main-header">☕ Kyiv Cafe Map</div>', unsafe_allow_html=True)

if controller.error:
    st.error(controller.error)
    if st.button("Try again"):
        with st.spinner("Loading cafes..."):
            controller.retry()
        st.rerun()
    st.stop()

# Filter buttons
columns = st.columns(len(FILTERS))
for column, filter_name in zip(columns, FILTERS):
    active = controller.current_filter == filter_name
    if column.button(
        FILTER_LABELS[filter_name],
        key=f"filter_{filter_name}",
        type="primary" if active else "secondary",
        use_container_width=True,
    ):
        controller.set_filter(filter_name)
        st.rerun()

st.markdown(f'<p class="counter">{controller.counter_text()}</p>', unsafe_allow_html=True)

# Map
event = st.pydeck_chart(
    controller.layer.build_deck(),
    on_select="rerun",
    selection_mode="single-object",
    key=f"cafe_map_{controller.selection_epoch}",
)
picked = (event.selection.get("objects") or {}).get(LAYER_ID) if event else None
if picked:
    controller.pick("map", picked[0]["id"])

# Search by name
labels = {cafe["id"]: f"{cafe['name']} · {cafe['address']}" for cafe in controller.cafes}
choice = st.selectbox(
    "Find a cafe",
    options=[""] + sorted(labels, key=labels.get),
    format_func=lambda cafe_id: labels.get(cafe_id, ""),
    index=0,
    key=f"cafe_search_{controller.selection_epoch}",
)
if choice:
    controller.pick("search", choice)

# Detail panel
cafe = controller.selected_cafe
if cafe:
    with st.container(border=True):
        header, close = st.columns([6, 1])
        header.subheader(escape_markdown(cafe["name"]))
        if close.button("✕", key="close_detail"):
            controller.close()
            st.rerun()

        for label, value in detail_lines(cafe):
            st.markdown(f"**{label}:** {escape_markdown(value)}")
        if cafe.get("website", "").startswith(("http://", "https://")):
            st.link_button("Open website", cafe["website"])

        if controller.warning:
            st.warning(controller.warning)

        visited_col, disliked_col, reset_col = st.columns(3)
        if visited_col.button("✅ Visited", use_container_width=True):
            controller.set_status("visited")
            st.rerun()
        if disliked_col.button("👎 Don't like", use_container_width=True):
            controller.set_status("disliked")
            st.rerun()
        if reset_col.button("↺ Reset", use_container_width=True):
            controller.set_status("new")
            st.rerun()

# Footer
st.divider()
st.markdown("""
<div style='text-align: center; color: #999; padding: 1rem;'>
    <small>Data © OpenStreetMap contributors via Overpass API | Made with Streamlit</small>
</div>
""", unsafe_allow_html=True)
