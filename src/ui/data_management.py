"""Data Management tab - bulk imports, templates and exports."""

import streamlit as st
from typing import List

from ..models.records import ImportSummary
from ..models.riders import Rider
from ..models.users import Viewer
from ..services.export_service import (
    rider_template_csv,
    riders_to_csv,
    riders_to_excel,
    wallet_template_csv,
)
from ..services.import_service import (
    REQUIRED_RIDER_COLUMNS,
    WALLET_COLUMNS,
    RiderImporter,
    WalletImporter,
    missing_columns,
    read_tabular,
)
from ..utils.validation import validate_import_row


def render_import_summary(summary: ImportSummary):
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Rows", summary.total)
    with col2:
        st.metric("Imported", summary.success)
    with col3:
        st.metric("Failed", summary.failed)

    if summary.status == "success":
        st.success("Import complete")
    elif summary.status == "partial":
        st.warning("Import finished with some failures")
    else:
        st.error("Import failed")

    if summary.errors:
        st.dataframe(
            [{"Row": e.row, "Identifier": e.identifier, "Reason": e.reason} for e in summary.errors],
            use_container_width=True,
            hide_index=True,
        )


def render_rider_import(viewer: Viewer, importer: RiderImporter):
    st.subheader("Import Riders")
    st.download_button(
        "📄 Rider template",
        data=rider_template_csv(),
        file_name="rider_import_template.csv",
        mime="text/csv",
    )

    upload = st.file_uploader("Rider file", type=["csv", "xlsx", "xls"], key="rider_upload")
    if upload is None:
        return

    try:
        rows = read_tabular(upload.name, upload.getvalue())
    except ValueError as e:
        st.error(f"Could not read file: {e}")
        return

    missing = missing_columns(rows, REQUIRED_RIDER_COLUMNS)
    if missing:
        st.error(f"Missing columns: {', '.join(missing)}")
        return

    problems = [msg for index, row in enumerate(rows) for msg in validate_import_row(row, index)]
    st.write(f"**Preview:** {len(rows)} rows")
    st.dataframe(rows[:20], use_container_width=True, hide_index=True)
    if problems:
        with st.expander(f"⚠️ {len(problems)} validation issue(s)"):
            for msg in problems:
                st.write(f"- {msg}")

    if st.button("Start Rider Import", type="primary", key="run_rider_import"):
        with st.spinner(f"Importing {len(rows)} riders..."):
            summary = importer.run(rows, viewer)
        render_import_summary(summary)


def render_wallet_import(viewer: Viewer, importer: WalletImporter):
    st.subheader("Update Wallets")
    st.download_button(
        "📄 Wallet template",
        data=wallet_template_csv(),
        file_name="wallet_update_template.csv",
        mime="text/csv",
    )

    upload = st.file_uploader("Wallet file", type=["csv", "xlsx", "xls"], key="wallet_upload")
    if upload is None:
        return

    try:
        rows = read_tabular(upload.name, upload.getvalue())
    except ValueError as e:
        st.error(f"Could not read file: {e}")
        return

    if "Wallet Amount" in missing_columns(rows, WALLET_COLUMNS):
        st.error("Missing column: Wallet Amount")
        return

    st.write(f"**Preview:** {len(rows)} rows")
    st.dataframe(rows[:20], use_container_width=True, hide_index=True)

    if st.button("Start Wallet Update", type="primary", key="run_wallet_import"):
        with st.spinner(f"Updating {len(rows)} wallets..."):
            summary = importer.run(rows, viewer)
        render_import_summary(summary)


def render_data_management(
    viewer: Viewer,
    riders: List[Rider],
    rider_importer: RiderImporter,
    wallet_importer: WalletImporter,
):
    """Render the Data Management tab. Imports are admin only."""
    st.header("Data Management")

    st.subheader("Export")
    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "📥 Riders (CSV)",
            data=riders_to_csv(riders),
            file_name="riders.csv",
            mime="text/csv",
            use_container_width=True,
        )
    with col2:
        st.download_button(
            "📥 Riders (Excel)",
            data=riders_to_excel(riders),
            file_name="riders.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True,
        )

    st.divider()

    if not viewer.is_admin:
        st.info("Bulk imports are available to admins only.")
        return

    tab1, tab2 = st.tabs(["Riders", "Wallets"])
    with tab1:
        render_rider_import(viewer, rider_importer)
    with tab2:
        render_wallet_import(viewer, wallet_importer)
