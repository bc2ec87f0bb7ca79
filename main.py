"""FleetDesk - EV fleet back-office for leads, riders and wallets."""

import logging
import streamlit as st

from src.models.users import Viewer
from src.services import (
    ActivityLogger,
    AIService,
    BackendError,
    ChatService,
    FleetStore,
    LeadActions,
    MockAIService,
    NotificationService,
    RiderImporter,
    WalletImporter,
    summarize_for_viewer,
)
from src.ui import (
    render_data_management,
    render_lead_board,
    render_notifications,
    render_rider_desk,
    render_sidebar,
    render_support_chat,
)
from src.utils.settings import configure_logging, load_settings

logger = logging.getLogger(__name__)


# Page configuration
st.set_page_config(
    page_title="FleetDesk",
    page_icon="🛵",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better styling
st.markdown("""
<style>
    .stTabs [data-baseweb="tab-list"] {
        gap: 24px;
    }
    .stTabs [data-baseweb="tab"] {
        height: 50px;
        padding-left: 20px;
        padding-right: 20px;
    }
    .main .block-container {
        padding-top: 2rem;
    }
</style>
""", unsafe_allow_html=True)


def initialize_session_state():
    """Initialize session state variables."""
    defaults = {
        "use_mock": True,
        "viewer_index": 0,
        "lead_category_filter": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def get_store(settings) -> FleetStore:
    """One Supabase client per browser session."""
    if "store" not in st.session_state:
        st.session_state["store"] = FleetStore.connect(settings.supabase_url, settings.supabase_key)
    return st.session_state["store"]


def build_assistant(config: dict, settings) -> AIService:
    if config["use_mock"] or not config["ai_api_key"]:
        return MockAIService()
    return AIService(
        api_key=config["ai_api_key"],
        model=settings.ai_model,
        base_url=settings.ai_base_url,
    )


def dashboard_stats(viewer: Viewer, leads, riders) -> dict:
    """Live numbers shared with the support assistant."""
    result = summarize_for_viewer(viewer, leads, riders)
    return {
        "Genuine leads": result.genuine_count,
        "Duplicate leads": result.duplicate_count,
        "Matched leads": result.match_count,
        "Riders": len(riders),
        "Riders with dues": sum(1 for rider in riders if rider.has_dues),
    }


def main():
    """Main application entry point."""
    settings = load_settings()
    configure_logging(settings.log_level)
    initialize_session_state()

    # Title
    st.title("🛵 FleetDesk")
    st.caption("Lead intake, rider administration and wallet tracking")

    if not settings.has_backend:
        render_sidebar(settings, [])
        st.error("Backend is not configured. Add SUPABASE_URL and SUPABASE_KEY to .env or Streamlit secrets.")
        st.stop()

    try:
        store = get_store(settings)
        users = store.fetch_users()
    except BackendError as e:
        logger.error(f"Startup failed: {e}")
        st.error(f"Could not reach the backend: {e}")
        st.stop()

    config = render_sidebar(settings, users)
    viewer = config["viewer"]

    # Everything below is recomputed from fresh data on every rerun
    try:
        leads = store.fetch_leads()
        riders = store.fetch_riders()
    except BackendError as e:
        st.error(f"Could not load data: {e}")
        st.stop()

    ai = build_assistant(config, settings)
    notifications = NotificationService(store)
    activity = ActivityLogger(store, notifications)
    # Mock mode scores new leads with the deterministic heuristic
    lead_actions = LeadActions(store, activity, None if isinstance(ai, MockAIService) else ai)

    logger.debug(f"Rendering for {viewer.user_id}: {len(leads)} leads, {len(riders)} riders")

    tab1, tab2, tab3, tab4, tab5 = st.tabs(
        ["Lead Board", "Rider Desk", "Data Management", "Notifications", "Support Chat"]
    )

    with tab1:
        render_lead_board(viewer, leads, riders, lead_actions, ai)

    with tab2:
        render_rider_desk(viewer, riders, ai)

    with tab3:
        render_data_management(
            viewer,
            riders,
            RiderImporter(store, activity),
            WalletImporter(store, activity),
        )

    with tab4:
        render_notifications(viewer, store, notifications, users)

    with tab5:
        render_support_chat(viewer, ChatService(store, ai), dashboard_stats(viewer, leads, riders))


if __name__ == "__main__":
    main()
