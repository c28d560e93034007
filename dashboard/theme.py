import streamlit as st

THEME_PRESETS = {
    "dark": {
        "bg_main": "#0f1117",
        "bg_glow": "#1b1f2b",
        "bg_card": "#171b26",
        "border": "#2f3647",
        "text_main": "#eef1f7",
        "text_soft": "#a7b0c2",
        "accent": "#5b8def",
        "plot_grid": "#2a3040",
        "plot_marker_line": "#e6ebf5",
        "divider": "rgba(255,255,255,0.08)",
    },
    "light": {
        "bg_main": "#f7f8fb",
        "bg_glow": "#e9edf5",
        "bg_card": "#ffffff",
        "border": "#d5dae5",
        "text_main": "#1b1f2a",
        "text_soft": "#5d6473",
        "accent": "#3772a6",
        "plot_grid": "#e1e5ee",
        "plot_marker_line": "#ffffff",
        "divider": "rgba(0,0,0,0.08)",
    },
}


def ensure_theme_state():
    if st.session_state.get("ui_theme") not in THEME_PRESETS:
        st.session_state["ui_theme"] = "dark"
    return st.session_state["ui_theme"]


def get_active_theme():
    name = ensure_theme_state()
    return name, THEME_PRESETS[name]


def toggle_theme():
    name = ensure_theme_state()
    st.session_state["ui_theme"] = "light" if name == "dark" else "dark"


def inject_theme_css() -> dict:
    active_name, active_theme = get_active_theme()
    css_vars = "\n".join(
        f"    --{key.replace('_', '-')}: {value};" for key, value in active_theme.items()
    )
    st.markdown(
        "<style>\n:root {\n"
        + css_vars
        + """
}

.stApp {
    background: radial-gradient(1200px 800px at 20% 0%, var(--bg-glow) 0%, var(--bg-main) 60%);
    color: var(--text-main);
}

.section-title {
    font-size: 15px;
    font-weight: 600;
    margin: 0 0 8px 0;
}

.small-label {
    color: var(--text-soft);
    font-size: 12px;
    letter-spacing: 0.2px;
}

.card {
    background: var(--bg-card);
    border: 1px solid var(--border);
    border-radius: 12px;
    padding: 14px 16px;
    margin-bottom: 12px;
}

.badge {
    display: inline-block;
    padding: 2px 8px;
    margin: 0 4px 4px 0;
    border-radius: 999px;
    font-size: 12px;
    border: 1px solid var(--border);
}

.stMetric {
    background: var(--bg-card);
    padding: 10px 12px;
    border-radius: 12px;
    border: 1px solid var(--border);
}
</style>
""",
        unsafe_allow_html=True,
    )
    return {
        "name": active_name,
        "theme": active_theme,
        "toggle_icon": "☀️" if active_name == "dark" else "🌙",
        "toggle_help": "Switch to light mode" if active_name == "dark" else "Switch to dark mode",
    }
