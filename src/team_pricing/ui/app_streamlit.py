"""
Streamlit UI for TEAM items.

Features:
- Item list with live price and participant count
- Detail view with discount progress toward the next step
- Join button (one participation per local user id)
- Pricing explanation trace
"""
import uuid

import pandas as pd
import streamlit as st

from team_pricing.config.settings import get_settings, configure_logging
from team_pricing.engine.pricing_engine import compute_pricing_progress, explain_pricing
from team_pricing.errors import TeamPricingError
from team_pricing.services.team_items_service import TeamItemsService


st.set_page_config(
    page_title="TEAM Items",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_service():
    """Get cached service instance."""
    settings = get_settings()
    configure_logging(settings)
    return TeamItemsService(settings.team_items_csv, settings.participants_csv)


def get_local_user_id() -> str:
    """Stable per-session participant id."""
    if "local_user_id" not in st.session_state:
        st.session_state["local_user_id"] = uuid.uuid4().hex
    return st.session_state["local_user_id"]


try:
    service = get_service()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


# ============================================================================
# SIDEBAR: Item list
# ============================================================================
quotes = service.quote_all(active_only=True)

with st.sidebar:
    st.header("🛒 TEAM Items")
    if not quotes:
        st.info("No active items yet.")
        st.stop()

    slugs = [q.item.slug for q in quotes]
    titles = {q.item.slug: q.item.title for q in quotes}
    selected_slug = st.radio("Item", slugs, format_func=lambda s: titles.get(s, s))

    st.divider()
    st.caption(f"Your participant id: `{get_local_user_id()[:8]}…`")

    if st.button("🔄 Refresh count", use_container_width=True):
        st.rerun()


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("TEAM Items")

tab1, tab2 = st.tabs(["🏷️ Item Detail", "📋 All Items"])

with tab1:
    try:
        item = service.require_item(selected_slug)
    except TeamPricingError as e:
        st.error(e.explanation)
        st.stop()

    # Fresh count on every render; the price may lag concurrent joins
    count = service.count_participants(item.id)
    pricing = compute_pricing_progress(item.pricing, count)

    if item.cover_image_url:
        st.image(item.cover_image_url, use_container_width=True)

    st.subheader(item.title)
    if item.description:
        st.write(item.description)
    if item.tags:
        st.caption(" · ".join(f"#{t}" for t in item.tags))

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Current Price", f"{pricing.current_price:,}")
    col2.metric("Base Price", f"{int(item.pricing.base_price):,}")
    col3.metric("Discount", f"{pricing.discount_percent:g}%")
    col4.metric("Participants", count)

    if pricing.to_next_step == 0:
        st.success("Maximum discount reached.")
    else:
        st.markdown(f"**{pricing.to_next_step}** more participant(s) to the next discount step")
    st.progress(pricing.progress_percent / 100)

    if st.button("🙋 Join", type="primary"):
        try:
            new_count = service.join(item.slug, get_local_user_id())
            st.toast(f"Joined! {new_count} participants. The price drops as more people join.")
            st.rerun()
        except TeamPricingError as e:
            st.error(e.explanation)

    with st.expander("🔍 Pricing Details"):
        for step in explain_pricing(item.pricing, count):
            if step.value:
                st.caption(f"**{step.step}**: {step.description} = `{step.value}`")
            else:
                st.caption(f"**{step.step}**: {step.description}")

with tab2:
    df = pd.DataFrame([
        {
            "Title": q.item.title,
            "Slug": q.item.slug,
            "Participants": q.participants,
            "Base Price": int(q.item.pricing.base_price),
            "Current Price": q.final_price,
            "Max Discount %": q.item.pricing.max_discount_percent,
        }
        for q in quotes
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)
