"""Streamlit order activity dashboard."""

from datetime import date, timedelta

import streamlit as st

from orderboard.core.config import settings
from orderboard.core.errors import ReportError
from orderboard.services.report_service import build_dashboard
from streamlit_app.common import get_session, list_sites, now_string

st.set_page_config(page_title="Order dashboard", layout="wide")
st.title("Order activity")
st.caption(f"Last refresh: {now_string()}")

with get_session() as db:
    sites = list_sites(db)
    if not sites:
        st.warning("No sites configured yet.")
        st.stop()

    site_map = {f"{site.display_name} ({site.slug})": site.slug for site in sites}
    selected_site = st.selectbox("Site", list(site_map.keys()))
    mode = st.radio("Window", ["week", "month", "custom"], horizontal=True)
    tz = st.text_input("Timezone", value=settings.report_timezone)

    start_text: str | None = None
    end_text: str | None = None
    if mode == "custom":
        today = date.today()
        picked = st.date_input("Range", value=(today - timedelta(days=13), today))
        if isinstance(picked, tuple) and len(picked) == 2:
            start_text, end_text = picked[0].isoformat(), picked[1].isoformat()
        else:
            st.info("Pick a start and an end date.")
            st.stop()

    try:
        report = build_dashboard(db, site=site_map[selected_site], mode=mode, tz=tz, start=start_text, end=end_text)
    except ReportError as exc:
        st.error(exc.message)
        st.stop()

    days = [f"{index + 1:02d} {label}" for index, label in enumerate(report.labels)]
    totals = report.totals
    col_orders, col_revenue, col_customers, col_menu = st.columns(4)
    col_orders.metric("Orders", totals.orders)
    col_revenue.metric("Revenue", f"{totals.revenue:.2f}")
    col_customers.metric("Unique customers", totals.customers_unique)
    col_menu.metric("Menu items sold", totals.menu_unique)

    st.caption(f"{report.window.start.isoformat()} → {report.window.end.isoformat()} ({report.tz})")
    st.subheader("Orders per day")
    st.bar_chart({"orders": report.orders, "day": days}, x="day", y="orders")
    st.subheader("Revenue per day")
    st.line_chart({"revenue": report.revenue, "day": days}, x="day", y="revenue")
    st.subheader("Customers per day")
    st.bar_chart({"customers": report.customers, "day": days}, x="day", y="customers")
