"""
eProjet - Painel de gestão do escritório de arquitetura
Interface Streamlit

Executar com: streamlit run app.py
"""
import logging
import sys
from pathlib import Path

import streamlit as st

# Adicionar a raiz do projeto ao path
sys.path.insert(0, str(Path(__file__).parent))

from eprojet.ui.styles import apply_custom_css
from eprojet.i18n import t, set_language, get_language
from eprojet.config import load_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Carregar idioma da configuração (antes do set_page_config)
config = load_config()
preferred_lang = config.get('language', 'pt')
current_lang = get_language()
if preferred_lang != current_lang:
    set_language(preferred_lang)

# ============================================================================
# CONFIGURAÇÃO DA PÁGINA
# ============================================================================

st.set_page_config(
    page_title=t('page_title'),
    page_icon="📐",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Aplicar CSS personalizado
apply_custom_css(st)

# Desabilitar tradução automática do navegador
st.markdown(
    '<meta name="google" content="notranslate">',
    unsafe_allow_html=True
)


# ============================================================================
# NAVEGAÇÃO PRINCIPAL
# ============================================================================

def main():
    nav_options = [
        t('navigation.dashboard'),    # 0: Painel (padrão)
        t('navigation.projections'),  # 1: Projeções
        t('navigation.late'),         # 2: Atrasados
        t('navigation.contracts'),    # 3: Contratos
        t('navigation.progress'),     # 4: Progresso
        t('navigation.analytics'),    # 5: Análises
        t('navigation.expenses'),     # 6: Despesas
        t('navigation.reminders'),    # 7: Lembretes
        t('navigation.partners'),     # 8: Parceiros
        t('navigation.settings'),     # 9: Configurações
    ]

    if 'active_section' not in st.session_state:
        st.session_state.active_section = nav_options[0]

    selected_section = st.radio(
        label="🧭 Navegação",
        options=nav_options,
        index=nav_options.index(st.session_state.active_section) if st.session_state.active_section in nav_options else 0,
        key="nav_radio",
        horizontal=True,
        label_visibility="collapsed"
    )

    st.session_state.active_section = selected_section

    st.markdown("---")

    from eprojet.ui.sidebar import render_sidebar
    render_sidebar()

    # Importa e renderiza apenas a seção ativa
    if selected_section == nav_options[0]:
        from eprojet.ui.dashboard import render_dashboard
        render_dashboard()

    elif selected_section == nav_options[1]:
        from eprojet.ui.projecoes import render_projecoes
        render_projecoes()

    elif selected_section == nav_options[2]:
        from eprojet.ui.atrasados import render_atrasados
        render_atrasados()

    elif selected_section == nav_options[3]:
        from eprojet.ui.contratos import render_contratos
        render_contratos()

    elif selected_section == nav_options[4]:
        from eprojet.ui.progresso import render_progresso
        render_progresso()

    elif selected_section == nav_options[5]:
        from eprojet.ui.analises import render_analises
        render_analises()

    elif selected_section == nav_options[6]:
        from eprojet.ui.despesas import render_despesas
        render_despesas()

    elif selected_section == nav_options[7]:
        from eprojet.ui.lembretes import render_lembretes
        render_lembretes()

    elif selected_section == nav_options[8]:
        from eprojet.ui.parceiros import render_parceiros
        render_parceiros()

    elif selected_section == nav_options[9]:
        from eprojet.ui.configuracoes import render_configuracoes
        render_configuracoes()


if __name__ == "__main__":
    main()
