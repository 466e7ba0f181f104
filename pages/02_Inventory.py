# =============================================================================
# 02_Inventory.py - Stock list, movements and item management
# =============================================================================
from __future__ import annotations
import streamlit as st

st.set_page_config(page_title="Inventory - FabStock", page_icon="📦", layout="wide")

from fabstock_core.ai import FabLabAssistant
from fabstock_core.errors import ErrorContext
from fabstock_core.models import Category, InventoryItem, StockStatus
from fabstock_core.services import InventoryService
from fabstock_core.ui import bootstrap_page, header

user, provider = bootstrap_page()
inventory = InventoryService(provider)

STATUS_BADGE = {
    StockStatus.IN_STOCK: "🟢",
    StockStatus.LOW_STOCK: "🟠",
    StockStatus.OUT_OF_STOCK: "🔴",
    StockStatus.ORDERED: "🔵",
}

header("Inventory", "Consumables, components and tools", icon="📦")

if not user.can_manage_stock:
    st.info("👀 Read-only access: ask an administrator to manage stock.")

# =============================================================================
# ADD ITEM (manual or AI-assisted)
# =============================================================================
with st.expander("➕ Add an item", expanded=False):
    assistant = FabLabAssistant()
    if assistant.is_configured:
        description = st.text_area("Describe the item (AI fills the form)",
                                   placeholder="A box of 50 M3x10 stainless screws, about 5€")
        if st.button("✨ Analyse", disabled=not description.strip()):
            with ErrorContext("Analysing item description"):
                with st.spinner("Analysing..."):
                    st.session_state.item_suggestion = assistant.analyze_item_text(description)

    suggestion = st.session_state.get("item_suggestion")
    categories = list(Category)
    with st.form("add_item_form", clear_on_submit=True):
        name = st.text_input("Name", value=suggestion.name if suggestion else "")
        item_description = st.text_input("Description", value=suggestion.description if suggestion else "")
        category = st.selectbox(
            "Category", categories,
            index=categories.index(suggestion.category) if suggestion else len(categories) - 1,
            format_func=lambda c: c.value,
        )
        c1, c2, c3 = st.columns(3)
        quantity = c1.number_input("Quantity", min_value=0, step=1,
                                   value=suggestion.suggested_quantity if suggestion else 1)
        min_quantity = c2.number_input("Minimum", min_value=0, step=1,
                                       value=suggestion.suggested_min_quantity if suggestion else 0)
        price = c3.number_input("Unit price (€)", min_value=0.0, step=0.1,
                                value=float(suggestion.estimated_price or 0.0) if suggestion else 0.0)
        location = st.text_input("Location", value=suggestion.location_suggestion if suggestion else "")
        submitted = st.form_submit_button("Add item")

    if submitted:
        with ErrorContext("Adding item", show_success=True, success_message=f"{name} added") as ctx:
            inventory.add_item({
                "name": name,
                "description": item_description,
                "category": category,
                "quantity": quantity,
                "min_quantity": min_quantity,
                "price_per_unit": price or None,
                "location": location,
            }, user)
        if not ctx.failed:
            st.session_state.item_suggestion = None

# =============================================================================
# FILTERS
# =============================================================================
f1, f2 = st.columns([3, 1])
query = f1.text_input("🔍 Search", key="inventory_query")
category_filter = f2.selectbox("Category", [None] + list(Category),
                               format_func=lambda c: "All" if c is None else c.value)

items = inventory.search(query, category_filter)
st.caption(f"{len(items)} item(s)")


def _edit_form(item: InventoryItem):
    with st.form(f"edit_{item.id}"):
        name = st.text_input("Name", value=item.name)
        description = st.text_input("Description", value=item.description)
        categories = list(Category)
        category = st.selectbox("Category", categories, index=categories.index(item.category),
                                format_func=lambda c: c.value)
        min_quantity = st.number_input("Minimum", min_value=0, step=1, value=item.min_quantity)
        location = st.text_input("Location", value=item.location)
        price = st.number_input("Unit price (€)", min_value=0.0, step=0.1,
                                value=float(item.price_per_unit or 0.0))
        if st.form_submit_button("Save"):
            with ErrorContext("Updating item") as ctx:
                inventory.update_item_details(InventoryItem(
                    id=item.id,
                    name=name.strip(),
                    description=description,
                    category=category,
                    quantity=item.quantity,
                    min_quantity=int(min_quantity),
                    location=location,
                    last_updated=item.last_updated,
                    price_per_unit=price or None,
                    history=item.history,
                ))
            if not ctx.failed:
                st.rerun()


# =============================================================================
# ITEM LIST
# =============================================================================
for item in items:
    status = inventory.stock_status(item)
    with st.container(border=True):
        c1, c2, c3, c4, c5 = st.columns([4, 2, 1, 1, 1])
        c1.markdown(f"**{item.name}**  \n{item.category.value} · 📍 {item.location or '-'}")
        c2.markdown(f"{STATUS_BADGE[status]} **{item.quantity}** / min {item.min_quantity}  \n"
                    f"<small>{status.value}</small>", unsafe_allow_html=True)

        for column, delta, label in ((c3, -1, "➖"), (c4, 1, "➕")):
            if column.button(label, key=f"adj_{delta}_{item.id}", disabled=not user.can_manage_stock):
                result = inventory.safe_execute("Adjusting stock", inventory.adjust_quantity,
                                                item.id, delta, user)
                if result:
                    st.rerun()
                else:
                    st.error(result.error)

        if c5.button("🗑️", key=f"del_{item.id}", disabled=not user.can_manage_stock):
            st.session_state[f"confirm_delete_{item.id}"] = True

        if st.session_state.get(f"confirm_delete_{item.id}"):
            st.warning(f"Delete **{item.name}**? This cannot be undone.")
            y, n = st.columns(2)
            if y.button("Confirm", key=f"yes_{item.id}"):
                with ErrorContext("Deleting item"):
                    inventory.delete_item(item.id, user)
                st.session_state.pop(f"confirm_delete_{item.id}", None)
                st.rerun()
            if n.button("Cancel", key=f"no_{item.id}"):
                st.session_state.pop(f"confirm_delete_{item.id}", None)
                st.rerun()

        with st.expander("History & details"):
            if item.description:
                st.write(item.description)
            st.dataframe(inventory.history_frame(item.id), use_container_width=True, hide_index=True)
            if user.can_manage_stock:
                _edit_form(item)
