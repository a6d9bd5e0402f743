import argparse
import html
import logging
import os
import sys

from PyQt6.QtWidgets import QApplication, QMainWindow, QFileDialog, QMessageBox, QVBoxLayout, QWidget, QLabel, QSplitter, QTextEdit, QTabWidget
from PyQt6.QtGui import QAction, QPalette, QColor
from PyQt6.QtCore import Qt

from knowgraph.graph_engine import GraphEngine, KINDS
from knowgraph.snapshot import SnapshotDetailSource, load_snapshot
from knowgraph.selection import SelectionBridge
from knowgraph.ui.graph_widget import GraphWidget
from knowgraph.ui.preferences import PreferencesDialog
from knowgraph.ui.renderer import KIND_COLORS
from knowgraph.resources import translations as trans_module
from knowgraph.resources.translations import tr

logger = logging.getLogger(__name__)

TAB_STYLE = """
    QTabWidget::pane { border: 0; }
    QTabBar::tab { background: #2d2d2d; color: #aaa; padding: 8px 15px; }
    QTabBar::tab:selected { background: #3e3e3e; color: #fff; }
"""


def format_detail(detail):
    """Renders an EntityDetail as HTML for the details panel."""
    text = f"<h2>{html.escape(detail.title or '')}</h2>"
    text += f"<p><i>{html.escape(str(detail.kind or ''))}</i></p>"

    if detail.url:
        url = html.escape(detail.url, quote=True)
        text += f'<p><a href="{url}">{url}</a></p>'
    if detail.source:
        text += f"<p><b>{tr('lbl_source')}:</b> {html.escape(detail.source)}</p>"
    if detail.tags:
        tags = ", ".join(html.escape(t) for t in detail.tags)
        text += f"<p><b>{tr('lbl_tags')}:</b> {tags}</p>"
    if detail.content:
        text += "<p>" + html.escape(detail.content).replace("\n", "<br>") + "</p>"

    text += f"<h3>{tr('lbl_connections')}</h3><ul>"
    if detail.linked:
        for item in detail.linked:
            text += f"<li>{html.escape(item['label'] or '')} <i>({html.escape(str(item['kind']))})</i></li>"
    else:
        text += f"<li><i>{tr('lbl_no_connections')}</i></li>"
    text += "</ul>"
    return text


def legend_html():
    parts = []
    for kind in KINDS:
        parts.append(f'<span style="color: {KIND_COLORS[kind]};">&#9679;</span> {tr("kind_" + kind)}')
    return "&nbsp;&nbsp;".join(parts)


class MainWindow(QMainWindow):
    def __init__(self, theme="Dark", seed=None, detail_delay=0.0):
        super().__init__()
        self.setWindowTitle(tr("window_title"))
        self.resize(1200, 800)

        # State
        self.current_theme = theme
        self.snapshot = None
        self.detail_delay = detail_delay

        # Setup Logic
        self.engine = GraphEngine(seed=seed)
        self.bridge = SelectionBridge()

        # Setup UI
        self.init_ui()
        self.setup_theme(self.current_theme)

        self.bridge.selection_changed.connect(self.graph_widget.set_selected)
        self.bridge.detail_changed.connect(self.on_detail_changed)
        self.bridge.loading_changed.connect(self.on_loading_changed)

    def init_ui(self):
        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)

        self.main_layout = QVBoxLayout(self.central_widget)
        self.main_layout.setContentsMargins(0, 0, 0, 0)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.main_layout.addWidget(self.splitter)

        # --- Left Panel (Details) ---
        self.tab_widget = QTabWidget()
        self.tab_widget.setStyleSheet(TAB_STYLE)

        self.details_panel = QTextEdit()
        self.details_panel.setReadOnly(True)
        self.details_panel.setText(tr("details_hint"))
        self.tab_widget.addTab(self.details_panel, tr("tab_details"))
        self.splitter.addWidget(self.tab_widget)

        # --- Right Panel (Legend + Graph + Stats) ---
        self.right_container = QWidget()
        self.right_layout = QVBoxLayout(self.right_container)
        self.right_layout.setContentsMargins(0, 0, 0, 0)
        self.right_layout.setSpacing(0)

        self.legend_label = QLabel(legend_html())
        self.legend_label.setTextFormat(Qt.TextFormat.RichText)
        self.right_layout.addWidget(self.legend_label)

        self.graph_widget = GraphWidget(self.engine, theme=self.current_theme)
        self.graph_widget.nodeClicked.connect(self.on_node_clicked)
        self.right_layout.addWidget(self.graph_widget, stretch=1)

        self.info_label = QLabel(tr("info_open"))
        self.info_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.right_layout.addWidget(self.info_label)

        self.splitter.addWidget(self.right_container)

        # 30% / 70%
        self.splitter.setStretchFactor(0, 30)
        self.splitter.setStretchFactor(1, 70)

        self.create_menu()

    def create_menu(self):
        menu = self.menuBar()
        menu.clear()

        file_menu = menu.addMenu(tr("menu_file"))

        open_action = QAction(tr("menu_open"), self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_file_dialog)
        file_menu.addAction(open_action)

        exit_action = QAction(tr("menu_exit"), self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = menu.addMenu(tr("menu_edit"))
        pref_action = QAction(tr("menu_prefs"), self)
        pref_action.triggered.connect(self.open_preferences)
        edit_menu.addAction(pref_action)

        view_menu = menu.addMenu(tr("menu_view"))
        reheat_action = QAction(tr("menu_reheat"), self)
        reheat_action.triggered.connect(self.engine.reheat)
        view_menu.addAction(reheat_action)

    def open_preferences(self):
        dlg = PreferencesDialog(self, trans_module.CURRENT_LANG, self.current_theme)
        dlg.settings_applied.connect(self.apply_preferences)
        dlg.exec()

    def apply_preferences(self, lang, theme):
        if lang != trans_module.CURRENT_LANG:
            trans_module.CURRENT_LANG = lang
            self.retranslate()

        if theme != self.current_theme:
            self.setup_theme(theme)
            self.current_theme = theme

    def retranslate(self):
        self.setWindowTitle(tr("window_title"))
        self.create_menu()
        self.tab_widget.setTabText(0, tr("tab_details"))
        self.legend_label.setText(legend_html())
        self.update_info()
        if self.bridge.selected_id is None:
            self.details_panel.setText(tr("details_hint"))
        else:
            self.on_detail_changed(self.bridge.detail)

    def setup_theme(self, theme_name):
        app = QApplication.instance()
        app.setStyle("Fusion")

        palette = QPalette()
        if theme_name == "Dark":
            palette.setColor(QPalette.ColorRole.Window, QColor(53, 53, 53))
            palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Base, QColor(25, 25, 25))
            palette.setColor(QPalette.ColorRole.AlternateBase, QColor(53, 53, 53))
            palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Button, QColor(53, 53, 53))
            palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Link, QColor(42, 130, 218))
            palette.setColor(QPalette.ColorRole.Highlight, QColor(42, 130, 218))
            palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.black)
            sheet = "QTextEdit { background-color: #1e1e1e; color: #d4d4d4; font-size: 13px; border: none; padding: 10px; }"
            bg, fg, bd = "#252526", "#ccc", "#3e3e3e"
        else:
            palette.setColor(QPalette.ColorRole.Window, QColor(240, 240, 240))
            palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.black)
            palette.setColor(QPalette.ColorRole.Base, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.AlternateBase, QColor(233, 231, 227))
            palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.black)
            palette.setColor(QPalette.ColorRole.Button, QColor(240, 240, 240))
            palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.black)
            palette.setColor(QPalette.ColorRole.Highlight, QColor(76, 163, 224))
            palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.white)
            sheet = "QTextEdit { background-color: #ffffff; color: #000000; font-size: 13px; border: none; padding: 10px; }"
            bg, fg, bd = "#e0e0e0", "#333", "#ccc"

        app.setPalette(palette)
        self.details_panel.setStyleSheet(sheet)
        self.graph_widget.set_theme(theme_name)

        label_style = f"padding: 5px; background-color: {bg}; color: {fg}; border-top: 1px solid {bd};"
        self.info_label.setStyleSheet(label_style)
        self.legend_label.setStyleSheet(label_style.replace("border-top", "border-bottom"))

    # --- Loading ---

    def open_file_dialog(self):
        fname, _ = QFileDialog.getOpenFileName(self, tr("menu_open"), "", "JSON (*.json);;All Files (*)")
        if fname:
            self.load_snapshot(fname)

    def load_snapshot(self, path):
        try:
            snapshot = load_snapshot(path)
            self.graph_widget.load(snapshot.nodes, snapshot.edges)
        except (OSError, ValueError) as e:
            logger.error("Failed to load snapshot %s: %s", path, e)
            QMessageBox.critical(self, tr("msg_error"), tr("msg_fail").format(str(e)))
            return False

        self.snapshot = snapshot
        self.bridge.set_source(SnapshotDetailSource(snapshot, delay=self.detail_delay))
        self.details_panel.setText(tr("details_hint"))
        self.update_info()
        self.setWindowTitle(f"{tr('window_title')} - {os.path.basename(path)}")
        return True

    def update_info(self):
        if self.snapshot is None:
            self.info_label.setText(tr("info_open"))
        else:
            self.info_label.setText(tr("info_loaded").format(len(self.engine.nodes), len(self.engine.edges)))

    # --- Selection ---

    def on_node_clicked(self, uid):
        self.bridge.select(uid)

    def on_loading_changed(self, loading):
        if loading:
            self.details_panel.setText(tr("details_loading"))

    def on_detail_changed(self, detail):
        if detail is not None:
            self.details_panel.setHtml(format_detail(detail))
        elif self.bridge.selected_id is not None and not self.bridge.loading:
            self.details_panel.setText(tr("details_missing"))

    def closeEvent(self, event):
        self.graph_widget.stop()
        self.bridge.wait()
        super().closeEvent(event)


def parse_args(argv):
    parser = argparse.ArgumentParser(prog="knowgraph", description="Interactive knowledge graph explorer.")
    parser.add_argument("--snapshot", help="JSON snapshot to open on startup")
    parser.add_argument("--seed", type=int, default=None, help="seed for initial node placement")
    parser.add_argument("--theme", choices=["Dark", "Light"], default="Dark")
    parser.add_argument("--lang", choices=sorted(trans_module.TRANSLATIONS), default="en")
    parser.add_argument("--detail-delay", type=float, default=0.0, metavar="SECONDS",
                        help="artificial latency for detail lookups")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    # Unknown arguments are left for Qt (-platform, -style, ...)
    return parser.parse_known_args(argv)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    args, qt_args = parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level))
    trans_module.CURRENT_LANG = args.lang

    app = QApplication([sys.argv[0]] + qt_args)
    window = MainWindow(theme=args.theme, seed=args.seed, detail_delay=args.detail_delay)
    # Shown first so the graph spawns around the real viewport center
    window.show()
    if args.snapshot:
        window.load_snapshot(args.snapshot)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
