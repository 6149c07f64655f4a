import csv

import streamlit as st
import plotly.express as px

from tadoku_stats.config import OUTPUT_FOLDER, CONVERSION_TABLE_VERSION
from tadoku_stats.ingestion.errors import IngestionError
from tadoku_stats.ingestion.snapshot import latest_snapshot, read_snapshot, entries_to_frame
from tadoku_stats.scoring.pipeline import run_rankings
from tadoku_stats.scoring.records import ScoringError

# --- Page Configuration ---
st.set_page_config(
    page_title="Tadoku Rankings",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# --- Design System ---
ACCENT_COLORS = {
    "primary": "#FF6B6B",       # Coral red - primary accent
}

# --- Leaderboard Flourishes ---
RANK_ICONS = {1: "👑", 2: "🥈", 3: "🥉"}


def with_rank_icons(df):
    """Prefix the podium ranks with medal icons."""
    df = df.copy()
    df['rank'] = df['rank'].apply(lambda r: f"{RANK_ICONS[r]} {r}" if r in RANK_ICONS else str(r))
    return df


TABLE_COLUMNS = {
    "rank": st.column_config.TextColumn("Rank"),
    "participant": st.column_config.TextColumn("Participant"),
    "score": st.column_config.NumberColumn("Pages", format="%.1f", help="Page-equivalent score"),
}


def show_table(table):
    st.dataframe(
        with_rank_icons(table.to_frame()),
        width='stretch',
        hide_index=True,
        column_config=TABLE_COLUMNS
    )


# --- Data Loading Functions ---
@st.cache_data(ttl=3600)
def load_snapshot_entries(path):
    """Load the entries of one snapshot file."""
    return read_snapshot(path)


def main():
    snapshot = latest_snapshot()
    if snapshot is None:
        st.error(f"No snapshot found in {OUTPUT_FOLDER}. Run `tadoku-stats fetch` first.")
        return

    try:
        entries = load_snapshot_entries(snapshot)
        rankings = run_rankings(entries)
    except (IngestionError, ScoringError) as e:
        st.error(f"Could not rank {snapshot.name}: {e}")
        return

    st.title("Tadoku Rankings")
    st.caption(f"Snapshot: {snapshot.name} · {len(entries)} entries · scoring table {CONVERSION_TABLE_VERSION}")

    tab_overall, tab_media, tab_languages, tab_raw = st.tabs(
        ["🏆 Overall", "📖 By Medium", "🌐 By Language", "🗂️ Raw Entries"]
    )

    # --- Tab 1: Overall ---
    with tab_overall:
        if len(rankings.overall) == 0:
            st.info("Nobody has logged any reading yet.")
        else:
            df_overall = rankings.overall.to_frame()
            fig = px.bar(
                df_overall.head(20),
                x='participant',
                y='score',
                labels={'participant': 'Participant', 'score': 'Pages'},
                color_discrete_sequence=[ACCENT_COLORS["primary"]]
            )
            fig.update_layout(
                showlegend=False,
                height=320,
                margin=dict(l=20, r=20, t=30, b=20),
            )
            st.plotly_chart(fig, use_container_width=True, config={'displayModeBar': False, 'scrollZoom': False})
            show_table(rankings.overall)

    # --- Tab 2: Per-Medium Podiums ---
    with tab_media:
        if not rankings.by_medium:
            st.info("No medium has any scores yet.")
        columns = st.columns(3)
        for i, (medium, table) in enumerate(rankings.by_medium.items()):
            with columns[i % 3]:
                st.subheader(medium.capitalize())
                show_table(table)

    # --- Tab 3: Per-Language Top 10 ---
    with tab_languages:
        if not rankings.by_language:
            st.info("No language has any scores yet.")
        for language, table in rankings.by_language.items():
            st.subheader(language)
            show_table(table)

    # --- Tab 4: Raw Entries ---
    with tab_raw:
        df_raw = entries_to_frame(entries)
        st.dataframe(df_raw, width='stretch', hide_index=True)
        st.download_button(
            "Download snapshot CSV",
            data=df_raw.to_csv(index=False, quoting=csv.QUOTE_NONNUMERIC),
            file_name=snapshot.with_suffix('.csv').name,
            mime="text/csv"
        )


if __name__ == "__main__":
    main()
