"""
Rainwater Harvesting Advisor - Main Application

Streamlit report surface: enter a property, get a feasibility report.
"""

import streamlit as st

# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(
    page_title="Rainwater Harvesting Advisor",
    page_icon="🌧️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Hide Streamlit chrome
st.markdown("""
<style>
    #MainMenu, header, footer, .stDeployButton {visibility: hidden; display: none;}
    .block-container { padding: 1rem 2rem; }
</style>
""", unsafe_allow_html=True)

# ═══════════════════════════════════════════════════════════════════════════
# IMPORTS
# ═══════════════════════════════════════════════════════════════════════════
import pandas as pd
import plotly.express as px

from core.config import EngineSettings, configure_logging
from core.models import Coordinates, InvalidInputError
from core.scoring import ROOF_MATERIAL_SCORES
from loaders.site import PropertyDetails, SiteDataFetcher

settings = EngineSettings.from_env()
configure_logging(settings.log_level)

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════════════════════════
st.sidebar.title("🌧️ Rainwater Advisor")
st.sidebar.markdown("---")

with st.sidebar.form("property"):
    location = st.text_input("Location", value="Guntur, Andhra Pradesh")
    roof_area = st.number_input("Roof area (m²)", value=150.0, min_value=1.0)
    roof_type = st.selectbox("Roof type", list(ROOF_MATERIAL_SCORES))
    dwellers = st.number_input("Dwellers", value=4, min_value=1, step=1)
    space = st.number_input("Open space (m²)", value=25.0, min_value=0.0)
    soil = st.text_input("Soil type", value="loam")
    use_coords = st.checkbox("I know the coordinates")
    lat = st.number_input("Latitude", value=16.3067, format="%.4f")
    lng = st.number_input("Longitude", value=80.4365, format="%.4f")
    submitted = st.form_submit_button("Assess")

if submitted:
    details = PropertyDetails(
        location=location,
        roof_area_m2=roof_area,
        num_dwellers=int(dwellers),
        available_space_m2=space,
        roof_type=roof_type,
        soil_type=soil or None,
        coordinates=Coordinates(lat, lng) if use_coords else None,
    )
    try:
        st.session_state.report = SiteDataFetcher(settings=settings).assess(details)
    except InvalidInputError as e:
        st.error(f"❌ {e}")

# ═══════════════════════════════════════════════════════════════════════════
# REPORT
# ═══════════════════════════════════════════════════════════════════════════
st.title("🌧️ Rooftop Rainwater Harvesting Feasibility")

report = st.session_state.get("report")
if report is None:
    st.info("Enter your property details in the sidebar and press **Assess**.")
    st.stop()

rec = report.recommendation
specs = report.structure
benefit = report.cost_benefit

col1, col2, col3, col4 = st.columns(4)
col1.metric("Feasibility", f"{rec.feasibility_score}/100", rec.feasibility_label)
col2.metric("Confidence", f"{rec.confidence}%")
col3.metric("Estimated Cost", f"₹{specs.estimated_cost:,}")
col4.metric("Payback", f"{benefit.payback_years} yrs" if benefit.pays_back else "Never")

st.caption(rec.feasibility_description)
st.markdown("---")

tab_system, tab_scores, tab_site = st.tabs(["🏗️ Recommended System", "📊 Scores", "🌍 Site Data"])

with tab_system:
    st.subheader(specs.type)
    for line in rec.reasoning:
        st.markdown(f"- {line}")
    st.markdown(f"**Alternatives:** {', '.join(a.value.replace('_', ' ') for a in rec.alternative_options)}")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Capacity", f"{specs.capacity:,} L")
        st.json(specs.dimensions.to_dict())
        st.markdown("**Materials:** " + ", ".join(specs.materials))
    with col2:
        st.dataframe(pd.DataFrame([report.cost_breakdown.to_dict()]).T.rename(columns={0: "₹"}))
        st.metric("Net annual savings", f"₹{benefit.net_annual_savings:,}")
        st.metric("CO₂ avoided", f"{benefit.co2_saved_kg:,.0f} kg/yr")

with tab_scores:
    scores = rec.score_breakdown.to_dict()
    fig = px.bar(
        x=list(scores.values()),
        y=[name.replace("_", " ") for name in scores],
        orientation="h",
        range_x=[0, 100],
        labels={"x": "Score", "y": ""},
        color_discrete_sequence=["#00bfff"],
    )
    fig.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20))
    st.plotly_chart(fig, width="stretch")

with tab_site:
    if report.rainfall is not None:
        rain = report.rainfall
        st.markdown(f"**Rainfall:** {rain.annual_rainfall_mm:g} mm/yr · {rain.source} · "
                    f"reliability {rain.reliability:.0%}")
        df_rain = pd.DataFrame([m.to_dict() for m in rain.monthly_data])
        fig_rain = px.bar(df_rain, x="month", y="rainfall_mm", color="intensity",
                          labels={"rainfall_mm": "Rainfall (mm)", "month": ""})
        fig_rain.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20))
        st.plotly_chart(fig_rain, width="stretch")
    if report.groundwater is not None:
        gw = report.groundwater
        st.markdown(f"**Groundwater:** {gw.depth_m} m · {gw.aquifer_type} · {gw.quality}")
        st.json(gw.seasonal_variation.to_dict())
