"""
Estilos CSS centralizados do eProjet.
"""
from eprojet.constants import (
    PRIMARY_COLOR, SUCCESS_COLOR, WARNING_COLOR, ERROR_COLOR, TEXT_SECONDARY
)


def apply_custom_css(st_instance):
    """
    Aplica o CSS personalizado à aplicação Streamlit.

    Args:
        st_instance: Instância do Streamlit (normalmente 'st')
    """
    css = f"""
    <style>
    /* Cabeçalho principal */
    .main-header {{
        background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, #0f172a 100%);
        padding: 1.5rem;
        border-radius: 10px;
        margin-bottom: 2rem;
        box-shadow: 0 4px 6px rgba(0,0,0,0.1);
    }}

    .main-header h1 {{
        color: white !important;
        margin: 0;
        font-size: 2rem;
    }}

    /* Cartões de indicadores */
    .kpi-card {{
        background: linear-gradient(135deg, #1e293b 0%, #0f172a 100%);
        padding: 1.2rem;
        border-radius: 8px;
        text-align: center;
        border: 1px solid rgba(255,255,255,0.1);
    }}

    .kpi-label {{
        font-size: 0.85rem;
        color: #e2e8f0;
        margin-bottom: 0.5rem;
    }}

    .kpi-value {{
        font-size: 1.5rem;
        font-weight: bold;
        color: white;
    }}

    /* Pontos de atenção */
    .ponto-atrasado {{ color: {ERROR_COLOR}; font-weight: 600; }}
    .ponto-urgente {{ color: {WARNING_COLOR}; font-weight: 600; }}
    .ponto-ok {{ color: {SUCCESS_COLOR}; }}
    .ponto-descricao {{ color: {TEXT_SECONDARY}; }}
    </style>
    """

    st_instance.markdown(css, unsafe_allow_html=True)


def kpi_card(st_instance, label: str, value: str, color: str = None):
    """Renderiza um cartão de indicador."""
    style = f' style="color: {color};"' if color else ""
    st_instance.markdown(f"""
    <div class="kpi-card">
        <div class="kpi-label">{label}</div>
        <div class="kpi-value"{style}>{value}</div>
    </div>
    """, unsafe_allow_html=True)
