CURRENT_LANG = "en"

TRANSLATIONS = {
    "en": {
        "window_title": "KnowGraph - Knowledge Graph Explorer",
        "menu_file": "&File",
        "menu_open": "Open Snapshot...",
        "menu_exit": "Exit",
        "menu_edit": "&Edit",
        "menu_prefs": "Preferences...",
        "menu_view": "&View",
        "menu_reheat": "Reheat Layout",
        "tab_details": "Details",
        "tab_graph": "Graph",
        "info_open": "Open a snapshot to explore your knowledge graph.",
        "info_loaded": "{0} entries · {1} connections",
        "empty_graph": "No entries yet.",
        "details_hint": "Click a node to view its details.",
        "details_loading": "Loading...",
        "details_missing": "No details available for this entry.",
        "lbl_connections": "Connections",
        "lbl_no_connections": "Not connected to other entries.",
        "lbl_tags": "Tags",
        "lbl_source": "Source",
        "kind_note": "Notes",
        "kind_link": "Links",
        "kind_highlight": "Highlights",
        "kind_person": "People",
        "kind_company": "Companies",
        "pref_title": "Preferences",
        "pref_lang": "Language:",
        "pref_theme": "Theme:",
        "btn_save": "Save",
        "btn_cancel": "Cancel",
        "msg_error": "Error",
        "msg_fail": "Could not load snapshot:\n{0}",
    },
    "pt": {
        "window_title": "KnowGraph - Explorador de Conhecimento",
        "menu_file": "&Arquivo",
        "menu_open": "Abrir Snapshot...",
        "menu_exit": "Sair",
        "menu_edit": "&Editar",
        "menu_prefs": "Preferências...",
        "menu_view": "&Exibir",
        "menu_reheat": "Reaquecer Layout",
        "tab_details": "Detalhes",
        "tab_graph": "Grafo",
        "info_open": "Abra um snapshot para explorar seu grafo de conhecimento.",
        "info_loaded": "{0} entradas · {1} conexões",
        "empty_graph": "Nenhuma entrada ainda.",
        "details_hint": "Clique em um nó para ver os detalhes.",
        "details_loading": "Carregando...",
        "details_missing": "Nenhum detalhe disponível para esta entrada.",
        "lbl_connections": "Conexões",
        "lbl_no_connections": "Sem conexões com outras entradas.",
        "lbl_tags": "Tags",
        "lbl_source": "Fonte",
        "kind_note": "Notas",
        "kind_link": "Links",
        "kind_highlight": "Destaques",
        "kind_person": "Pessoas",
        "kind_company": "Empresas",
        "pref_title": "Preferências",
        "pref_lang": "Idioma:",
        "pref_theme": "Tema:",
        "btn_save": "Salvar",
        "btn_cancel": "Cancelar",
        "msg_error": "Erro",
        "msg_fail": "Não foi possível carregar o snapshot:\n{0}",
    },
}


def tr(key):
    table = TRANSLATIONS.get(CURRENT_LANG, TRANSLATIONS["en"])
    return table.get(key, TRANSLATIONS["en"].get(key, key))
