# =============================================================================
# 06_Assistant.py - FabLab AI assistant chat
# =============================================================================
from __future__ import annotations
import streamlit as st

st.set_page_config(page_title="Assistant - FabStock", page_icon="🤖", layout="wide")

from fabstock_core.ai import FabLabAssistant
from fabstock_core.ui import bootstrap_page, header

user, provider = bootstrap_page()
assistant = FabLabAssistant()

header("Assistant", "Ask about project feasibility or workshop organisation", icon="🤖")

if not assistant.is_configured:
    st.warning("Set OPENAI_API_KEY (environment or .streamlit/secrets.toml) to enable the assistant.")

for message in st.session_state.chat_history:
    with st.chat_message(message["role"]):
        st.markdown(message["content"])

question = st.chat_input("Can we build 10 weather stations with what we have?")
if question:
    st.session_state.chat_history.append({"role": "user", "content": question})
    with st.chat_message("user"):
        st.markdown(question)

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            answer = assistant.get_advice(question, provider.items)
        st.markdown(answer)
    st.session_state.chat_history.append({"role": "assistant", "content": answer})

if st.session_state.chat_history and st.button("Clear conversation"):
    st.session_state.chat_history = []
    st.rerun()
