import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#4f46e5"
SECONDARY_COLOR  = "#7c3aed"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1e293b"
SUBTLE_TEXT      = "#64748b"
GRID_COLOR       = "#e2e8f0"
BACKGROUND_COLOR = "#f8fafc"
CARD_BG_LIGHT    = "#ffffff"

# Category pie slices
CHART_COLORS = ["#6366f1", "#8b5cf6", "#ec4899", "#f43f5e", "#f59e0b", "#10b981", "#3b82f6"]

# Tailwind avatar classes stored on team members -> hex
AVATAR_HEX = {
    "bg-indigo-500": "#6366f1",
    "bg-indigo-600": "#4f46e5",
    "bg-emerald-500": "#10b981",
    "bg-rose-500": "#f43f5e",
    "bg-amber-500": "#f59e0b",
    "bg-blue-500": "#3b82f6",
    "bg-purple-500": "#a855f7",
}


def apply_css():
    """Global look of the FabStock pages."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Inter','Segoe UI',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 1.6rem 2rem; border-radius: 16px; margin-bottom: 1.5rem;
            box-shadow: 0 8px 32px rgba(79,70,229,.25);
        }}
        .metric-card {{
            background: {CARD_BG_LIGHT}; padding: 20px; border-radius: 12px;
            box-shadow: 0 1px 3px rgba(0,0,0,0.06); margin: 10px 0; border: 1px solid {GRID_COLOR};
        }}
        .metric-card .label {{ color: {SUBTLE_TEXT}; font-size: .85rem; font-weight: 500; }}
        .metric-card .value {{ color: {TEXT_COLOR}; font-size: 1.6rem; font-weight: 700; }}
        .avatar {{
            display:inline-flex; align-items:center; justify-content:center;
            width: 2.2rem; height: 2.2rem; border-radius: 50%; color: white; font-weight: 700;
        }}
        .mode-badge {{
            display:inline-block; padding: .15rem .6rem; border-radius: 999px;
            font-size: .75rem; font-weight: 600; border: 1px solid {GRID_COLOR};
        }}
        .stButton button {{
            border-radius: 10px; font-weight: 600;
        }}
        h1,h2,h3,h4 {{ color: {TEXT_COLOR}; font-weight: 600; }}
        [data-testid="stSidebar"] {{ background-color: {CARD_BG_LIGHT}; border-right: 1px solid {GRID_COLOR}; }}
        </style>
    """, unsafe_allow_html=True)
