# =============================================================================
# 01_Dashboard.py - Stock overview
# =============================================================================
from __future__ import annotations
import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

st.set_page_config(page_title="Dashboard - FabStock", page_icon="📊", layout="wide")

from fabstock_core.models import MachineStatus, TicketStatus
from fabstock_core.services import InventoryService, MaintenanceService
from fabstock_core.ui import add_grid, bootstrap_page, header, metric_card
from fabstock_core.ui.theme import CHART_COLORS, DANGER_COLOR, PRIMARY_COLOR, SUCCESS_COLOR, WARNING_COLOR

user, provider = bootstrap_page()
inventory = InventoryService(provider)
maintenance = MaintenanceService(provider)

header("Dashboard", "Stock levels and machine park at a glance", icon="📊")

stats = inventory.dashboard_stats()

col1, col2, col3, col4 = st.columns(4)
with col1:
    metric_card("Total references", str(stats.total_references), PRIMARY_COLOR)
with col2:
    metric_card("Low stock", str(stats.low_stock_count), WARNING_COLOR)
with col3:
    metric_card("Estimated value", f"{stats.total_value:.2f} €", SUCCESS_COLOR)
with col4:
    metric_card("Total units", str(stats.total_units), PRIMARY_COLOR)

left, right = st.columns(2)

with left:
    st.subheader("Items per category")
    if stats.category_distribution:
        dist = pd.DataFrame(
            {"category": list(stats.category_distribution), "count": list(stats.category_distribution.values())}
        )
        fig = px.pie(dist, names="category", values="count", hole=0.45,
                     color_discrete_sequence=CHART_COLORS)
        st.plotly_chart(add_grid(fig), use_container_width=True)
    else:
        st.info("No items yet.")

with right:
    st.subheader("Low stock alerts")
    low = inventory.low_stock_items(limit=5)
    if low:
        fig = go.Figure()
        names = [item.name for item in low]
        fig.add_bar(name="In stock", x=names, y=[item.quantity for item in low], marker_color=DANGER_COLOR)
        fig.add_bar(name="Minimum", x=names, y=[item.min_quantity for item in low], marker_color="#cbd5e1")
        fig.update_layout(barmode="group")
        st.plotly_chart(add_grid(fig), use_container_width=True)
    else:
        st.success("✅ All stock levels are healthy.")

st.subheader("Machine park")
machines = provider.machines
open_tickets = [t for t in maintenance.tickets_by_status() if t.status is not TicketStatus.DONE]
mcol1, mcol2, mcol3 = st.columns(3)
mcol1.metric("Machines", len(machines))
mcol2.metric("Need attention", sum(1 for m in machines if m.status is not MachineStatus.OPERATIONAL))
mcol3.metric("Open tickets", len(open_tickets))
