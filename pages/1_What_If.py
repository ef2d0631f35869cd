"""
What-If Page - How the recommendation moves with rain, roof and space.
"""

import streamlit as st

st.set_page_config(
    page_title="What-If Scenarios - Rainwater Advisor",
    page_icon="🎚️",
    layout="wide"
)

st.markdown("""
<style>
    #MainMenu, header, footer, .stDeployButton {visibility: hidden; display: none;}
    .block-container { padding: 1rem 2rem; }
</style>
""", unsafe_allow_html=True)

import plotly.express as px

from core.config import EngineSettings
from core.sensitivity import WhatIfSimulator, to_dataframe

st.title("🎚️ What-If Scenarios")
st.markdown("*Re-run the recommendation with more or less rain, a bigger roof or less open space.*")

report = st.session_state.get("report")
if report is None:
    st.info("Run an assessment on the main page first.")
    st.stop()

settings = EngineSettings.from_env()

with st.sidebar:
    st.header("Assumptions")
    tariff = st.number_input("Water tariff (₹/L)", value=settings.water_tariff_per_liter,
                             min_value=0.001, step=0.005, format="%.3f")
    budget = st.number_input("Budget (₹, 0 = none)", value=0, min_value=0, step=10000)

results = WhatIfSimulator(tariff=tariff).run(report.site, budget=budget or None)
df = to_dataframe(results)

st.dataframe(df.drop(columns=["scenario"]), width="stretch", hide_index=True)

col1, col2 = st.columns(2)

with col1:
    st.subheader("💧 Harvest vs Savings")
    fig = px.bar(df, x="label", y=["harvest_potential", "water_savings"], barmode="group",
                 labels={"value": "Liters / year", "label": "", "variable": ""})
    fig.update_layout(height=350, margin=dict(l=20, r=20, t=20, b=20))
    st.plotly_chart(fig, width="stretch")

with col2:
    st.subheader("⏳ Payback Period")
    payback = df[df["payback_period"] != float("inf")]
    fig_payback = px.bar(payback, x="label", y="payback_period",
                         labels={"payback_period": "Years", "label": ""},
                         color_discrete_sequence=["#00bfff"])
    fig_payback.update_layout(height=350, margin=dict(l=20, r=20, t=20, b=20))
    st.plotly_chart(fig_payback, width="stretch")

st.info("💡 Compact systems may cost more per liter but can pay back sooner when demand, not rain, is the limit.")
