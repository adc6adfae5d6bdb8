"""Streamlit dashboard for GeoRisk Scanner."""

import sys
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import folium
import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

st.set_page_config(
    page_title="Análisis de Riesgo Geológico",
    page_icon="⛰️",
    layout="wide",
)

import georisk.utils.logger  # noqa: E402,F401
from georisk.core import (  # noqa: E402
    SCENARIOS,
    ExportFailure,
    GeoRiskError,
    RiskAnalyzer,
    SimulationSession,
    build_report,
    catalog,
    exporter,
    format_output,
)
from georisk.utils.config import settings  # noqa: E402
from georisk.utils.constants import CURRENT_CONDITIONS, SLIDER_RANGES, TIER_COLORS  # noqa: E402

# ============ INITIALIZE ============
if "analyzer" not in st.session_state:
    st.session_state.analyzer = RiskAnalyzer()
if "last_result" not in st.session_state:
    st.session_state.last_result = None
if "simulation" not in st.session_state:
    st.session_state.simulation = None
if "sim_rev" not in st.session_state:
    st.session_state.sim_rev = 0

SLIDER_LABELS = {
    "precipitation": "Precipitación anual (mm)",
    "slope": "Pendiente (°)",
    "elevation": "Elevación (m)",
    "soil_saturation": "Saturación del suelo (%)",
    "vegetation_cover": "Cobertura vegetal (%)",
    "human_activity": "Actividad humana (%)",
    "population_density": "Densidad poblacional (%)",
    "infrastructure_vulnerability": "Vulnerabilidad de infraestructura (%)",
    "drainage_quality": "Calidad del drenaje (%)",
}


def main():
    st.title("⛰️ Análisis de Riesgo Geológico")
    st.markdown(
        f"*Evaluación de riesgos de deslizamiento y colapso en {catalog.municipality.name}, "
        f"{catalog.municipality.department}*"
    )

    render_sidebar()

    tab1, tab2, tab3, tab4 = st.tabs([
        "🗺️ Análisis",
        "📊 Resultados",
        "🧪 Simulación",
        "📄 Exportar",
    ])

    with tab1:
        render_analysis_tab()

    with tab2:
        render_results_tab()

    with tab3:
        render_simulation_tab()

    with tab4:
        render_export_tab()


def render_sidebar():
    with st.sidebar:
        st.header("⚙️ Configuración del Análisis")

        mode = st.radio("Modo", ["Vereda", "Coordenadas"], horizontal=True)
        district = st.selectbox("Vereda", ["", *catalog.district_names()], index=0)

        lat = lng = None
        if mode == "Coordenadas":
            lat = st.text_input("Latitud", placeholder="6.4625")
            lng = st.text_input("Longitud", placeholder="-75.5522")
            st.caption("Si seleccionas una vereda, se usa como referencia.")
        elif district:
            st.caption(catalog.district(district).description)

        if st.button("🔍 Iniciar Análisis de Riesgo", type="primary", use_container_width=True):
            run_analysis(lat, lng, district or None)

        st.divider()
        st.caption("**Datos:** líneas base municipales 2025 con variación simulada")


def run_analysis(lat, lng, district):
    """Execute analysis and update state."""
    with st.spinner("Analizando riesgos geológicos..."):
        try:
            result = st.session_state.analyzer.analyze(lat or None, lng or None, district)
        except GeoRiskError as e:
            st.error(str(e))
            return

    st.session_state.last_result = result
    st.session_state.simulation = SimulationSession(result.snapshot)
    st.success(f"Análisis completo: {result.district.name}")


def render_analysis_tab():
    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader("📍 Veredas del Municipio")
        render_map()

    with col2:
        st.subheader("📊 Estado Actual")
        result = st.session_state.last_result
        if result:
            st.metric("Vereda", result.district.name)
            st.metric("Riesgo General", f"{result.composite.overall_risk}%", result.composite.tier)
            st.caption(f"Análisis: {result.analysis_id}")
        else:
            st.info("👈 Selecciona una vereda o ingresa coordenadas y pulsa **Iniciar Análisis**")


def render_map():
    center = settings.ui.map_center
    m = folium.Map(location=[center["lat"], center["lon"]], zoom_start=settings.ui.map_zoom, tiles="CartoDB positron")

    result = st.session_state.last_result
    for d in catalog.districts:
        selected = result is not None and result.district.name == d.name
        folium.CircleMarker(
            location=[d.center.lat, d.center.lng],
            radius=10 if selected else 7,
            color="red" if selected else "blue",
            fill=True,
            fillOpacity=0.7,
            popup=f"<b>{d.name}</b><br>{d.description}",
        ).add_to(m)

    if result:
        folium.Marker(
            location=[result.coordinates.lat, result.coordinates.lng],
            popup=f"Riesgo general: {result.composite.overall_risk}%",
            icon=folium.Icon(color="red", icon="exclamation-sign"),
        ).add_to(m)

    st_folium(m, width=700, height=450)


def _tier_badge(tier: str) -> str:
    color = TIER_COLORS.get(tier, "#6b7280")
    return f"<span style='background:{color};color:white;padding:2px 8px;border-radius:4px'>{tier.upper()}</span>"


def render_results_tab():
    result = st.session_state.last_result
    if not result:
        st.info("Ejecuta un análisis para ver los resultados")
        return

    st.subheader(f"Evaluación de Riesgo - {result.district.name}")
    st.markdown(_tier_badge(result.composite.tier), unsafe_allow_html=True)

    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Riesgo de Deslizamiento", f"{result.composite.landslide_risk}%", result.landslide.tier)
        st.progress(result.composite.landslide_risk / 100)
    with c2:
        st.metric("Riesgo de Colapso", f"{result.composite.collapse_risk}%", result.composite.collapse_tier)
        st.progress(result.composite.collapse_risk / 100)
    with c3:
        st.metric("Riesgo General", f"{result.composite.overall_risk}%", result.composite.tier)
        st.progress(result.composite.overall_risk / 100)

    snap = result.snapshot
    st.markdown("### Datos Geológicos y Ambientales")
    g1, g2, g3, g4 = st.columns(4)
    g1.metric("Elevación", f"{snap.elevation} m")
    g2.metric("Pendiente", f"{snap.slope:.1f}°")
    g3.metric("Precipitación", f"{snap.precipitation} mm")
    g4.metric("Suelo", snap.soil_type)
    st.caption(f"Formación geológica: {snap.geological_formation}")

    st.markdown("### Factores de Riesgo")
    factors = pd.DataFrame(
        [{"Factor": k, "Riesgo %": v} for k, v in result.landslide.factor_breakdown.items()]
    ).set_index("Factor")
    st.bar_chart(factors)

    demo = result.district.demographics
    st.markdown("### Información de la Vereda")
    i1, i2 = st.columns(2)
    with i1:
        st.markdown(f"**Población:** {demo.population}")
        st.markdown(f"**Actividad principal:** {demo.main_activity}")
    with i2:
        st.markdown("**Factores de riesgo:** " + ", ".join(demo.risk_factors))
        st.markdown("**Fortalezas:** " + ", ".join(demo.strengths))

    st.markdown("### Recomendaciones")
    for rec in result.composite.recommendations:
        st.markdown(f"- {rec}")

    with st.expander("Resumen"):
        st.markdown(format_output(result, "municipal"))
    with st.expander("Datos técnicos (JSON)"):
        st.code(format_output(result, "technical"), language="json")


def render_simulation_tab():
    session = st.session_state.simulation
    if session is None:
        st.info("Ejecuta un análisis para habilitar la simulación")
        return

    st.subheader("🧪 Simulación Avanzada de Escenarios de Riesgo")

    st.markdown("**Escenarios Predefinidos**")
    cols = st.columns(len(SCENARIOS) + 1)
    for col, (key, preset) in zip(cols, SCENARIOS.items()):
        if col.button(preset["name"], key=f"scenario_{key}", use_container_width=True):
            session.apply_scenario(key)
            st.session_state.sim_rev += 1
    if cols[-1].button("↺ Restaurar", use_container_width=True):
        session.reset()
        st.session_state.sim_rev += 1

    state = session.state
    left, right = st.columns(2)
    moved = {}
    for i, (name, (low, high, step)) in enumerate(SLIDER_RANGES.items()):
        target = left if i % 2 == 0 else right
        shown = min(max(type(low)(getattr(state, name)), low), high)
        value = target.slider(
            SLIDER_LABELS[name], low, high, shown, step,
            key=f"slider_{name}_{st.session_state.sim_rev}_{id(session)}",
        )
        # Only sliders the user touched override the state
        if value != shown:
            moved[name] = value
    if moved:
        session.set(**moved)

    months = [CURRENT_CONDITIONS] + [entry.month for entry in catalog.seasonal_calendar]
    season = st.selectbox(
        "Época del año",
        months,
        index=months.index(session.season),
        format_func=lambda m: "Condiciones actuales" if m == CURRENT_CONDITIONS else m,
    )
    session.select_season(season)

    sim = session.result()
    m1, m2, m3 = st.columns(3)
    m1.metric("Riesgo original", f"{sim.original_score:.1f}%")
    m2.metric("Riesgo simulado", f"{sim.simulated_score:.1f}% - {sim.tier.upper()}", f"{sim.delta:+.1f}")
    m3.metric(
        "Impacto económico",
        f"{sim.estimated_economic_impact / 1_000_000:+.1f}M {settings.simulation.currency}",
    )

    if sim.trend == "increased":
        st.warning(f"⚠️ **Riesgo aumentado:** +{sim.delta:.1f} puntos porcentuales.")
    elif sim.trend == "reduced":
        st.success(f"✅ **Riesgo reducido:** {abs(sim.delta):.1f} puntos porcentuales menos.")
    else:
        st.info("ℹ️ **Riesgo similar:** los cambios tienen un impacto mínimo.")

    st.markdown("### Riesgo estacional")
    profile = st.session_state.simulation.engine.seasonal_profile(sim.simulated_score)
    st.bar_chart(profile.set_index("month")["risk"])


def render_export_tab():
    result = st.session_state.last_result
    if not result:
        st.info("Ejecuta un análisis para habilitar la exportación")
        return

    st.subheader("📄 Exportar Reporte")
    report = build_report(result)

    col1, col2 = st.columns(2)
    for col, fmt, label in ((col1, "pdf", "📄 Descargar PDF"), (col2, "txt", "📝 Descargar Texto")):
        with col:
            try:
                exported = exporter.export(report, fmt)
            except ExportFailure as e:
                st.error(f"{e}. El análisis sigue disponible; intenta nuevamente.")
                continue
            st.download_button(
                label,
                data=exported.content,
                file_name=exported.filename,
                mime=exported.mime,
                use_container_width=True,
            )

    st.caption(
        "💡 Este informe es útil para presentaciones ante el Concejo Municipal, "
        "solicitudes de presupuesto para obras de mitigación y documentación oficial."
    )


if __name__ == "__main__":
    main()
