import json

import pytest
from PyQt6.QtWidgets import QMessageBox

from knowgraph.main import MainWindow, format_detail, parse_args
from knowgraph.resources import translations
from knowgraph.snapshot import EntityDetail

SNAPSHOT = {
    "nodes": [
        {"id": 1, "type": "note", "title": "Ideas"},
        {"id": 2, "type": "link", "title": "Article", "url": "https://example.org"},
        {"id": 3, "type": "highlight", "title": "Quote"},
    ],
    "edges": [{"fromId": 1, "toId": 2}, {"fromId": 3, "toId": 2}, {"fromId": 3, "toId": 99}],
}


@pytest.fixture
def window(qapp, monkeypatch):
    monkeypatch.setattr(translations, "CURRENT_LANG", "en")
    window = MainWindow(seed=3)
    yield window
    window.close()


@pytest.fixture
def errors(monkeypatch):
    shown = []
    monkeypatch.setattr(QMessageBox, "critical", lambda parent, title, text: shown.append(text))
    return shown


def write(tmp_path, name, document):
    path = tmp_path / name
    path.write_text(json.dumps(document) if not isinstance(document, str) else document, encoding="utf-8")
    return str(path)


def test_format_detail_escapes_and_lists_connections():
    detail = EntityDetail(
        1, "note", "<script>Ideas</script>",
        url="https://example.org/?a=1&b=2", tags=["x", "y&z"], content="line one\nline two",
        linked=[{"id": 2, "kind": "link", "label": "Article"}],
    )

    text = format_detail(detail)

    assert "&lt;script&gt;" in text
    assert "<script>" not in text
    assert "a=1&amp;b=2" in text
    assert "y&amp;z" in text
    assert "line one<br>line two" in text
    assert "Article" in text


def test_format_detail_without_connections():
    text = format_detail(EntityDetail(4, "person", "Ada"))
    assert translations.tr("lbl_no_connections") in text


def test_load_snapshot_updates_graph_and_counts(window, tmp_path):
    assert window.load_snapshot(write(tmp_path, "graph.json", SNAPSHOT))

    assert set(window.engine.nodes) == {1, 2, 3}
    assert window.info_label.text() == "3 entries · 2 connections"
    assert window.bridge.source is not None


def test_bad_snapshot_keeps_previous_graph(window, tmp_path, errors):
    window.load_snapshot(write(tmp_path, "graph.json", SNAPSHOT))

    assert not window.load_snapshot(write(tmp_path, "broken.json", "{not json"))
    assert not window.load_snapshot(str(tmp_path / "missing.json"))
    duplicate = {"nodes": [{"id": 1, "type": "note"}, {"id": 1, "type": "link"}]}
    assert not window.load_snapshot(write(tmp_path, "dupes.json", duplicate))

    assert len(errors) == 3
    assert set(window.engine.nodes) == {1, 2, 3}


def test_preferences_switch_language_and_theme(window, tmp_path):
    window.load_snapshot(write(tmp_path, "graph.json", SNAPSHOT))

    window.apply_preferences("pt", "Light")

    assert window.current_theme == "Light"
    assert window.graph_widget.renderer.theme == "Light"
    assert window.info_label.text() == "3 entradas · 2 conexões"
    assert window.tab_widget.tabText(0) == "Detalhes"


def test_detail_panel_follows_bridge(window, tmp_path):
    window.load_snapshot(write(tmp_path, "graph.json", SNAPSHOT))

    window.bridge.selected_id = 2
    window.bridge.on_fetched(2, EntityDetail(2, "link", "Article", url="https://example.org"))
    assert "Article" in window.details_panel.toPlainText()

    window.bridge.on_failed(2, "gone")
    assert window.details_panel.toPlainText() == translations.tr("details_missing")


def test_parse_args_leaves_qt_arguments():
    args, rest = parse_args(["--snapshot", "g.json", "--seed", "4", "--lang", "pt", "-platform", "offscreen"])

    assert args.snapshot == "g.json"
    assert args.seed == 4
    assert args.lang == "pt"
    assert args.theme == "Dark"
    assert rest == ["-platform", "offscreen"]


def test_preferences_dialog_emits_choice(qapp):
    from knowgraph.ui.preferences import PreferencesDialog

    dialog = PreferencesDialog(current_lang="en", current_theme="Dark")
    chosen = []
    dialog.settings_applied.connect(lambda lang, theme: chosen.append((lang, theme)))

    dialog.lang_combo.setCurrentIndex(1)
    dialog.theme_combo.setCurrentText("Light")
    dialog.on_save()

    assert chosen == [("pt", "Light")]


def test_preferences_dialog_previews_selected_theme(qapp):
    from knowgraph.ui.preferences import STYLES, PreferencesDialog

    dialog = PreferencesDialog(current_lang="pt", current_theme="Dark")
    assert dialog.lang_combo.currentData() == "pt"
    assert STYLES["Dark"]["bg"] in dialog.styleSheet()

    dialog.theme_combo.setCurrentText("Light")

    assert STYLES["Light"]["bg"] in dialog.styleSheet()
    assert STYLES["Dark"]["bg"] not in dialog.styleSheet()
