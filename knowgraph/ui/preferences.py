from PyQt6.QtWidgets import QDialog, QFormLayout, QDialogButtonBox, QComboBox
from PyQt6.QtCore import pyqtSignal

from knowgraph.resources.translations import tr

LANGUAGES = [("en", "English"), ("pt", "Português")]
THEMES = ["Dark", "Light"]

# Colors match the graph backgrounds in ui.renderer.THEMES
STYLES = {
    "Dark": {"bg": "#121212", "fg": "#e2e8f0", "field": "#1e1e1e", "border": "#334155",
             "accent": "#3b82f6", "accent_hover": "#60a5fa"},
    "Light": {"bg": "#f8fafc", "fg": "#1e293b", "field": "#ffffff", "border": "#cbd5e1",
              "accent": "#2563eb", "accent_hover": "#1d4ed8"},
}

STYLE_TEMPLATE = """
    QDialog {{ background-color: {bg}; color: {fg}; }}
    QLabel {{ color: {fg}; }}
    QComboBox {{ background-color: {field}; color: {fg}; padding: 4px; border: 1px solid {border}; border-radius: 4px; }}
    QPushButton {{ background-color: {accent}; color: white; padding: 5px 14px; border: none; border-radius: 4px; }}
    QPushButton:hover {{ background-color: {accent_hover}; }}
"""


def dialog_stylesheet(theme):
    return STYLE_TEMPLATE.format(**STYLES.get(theme, STYLES["Dark"]))


class PreferencesDialog(QDialog):
    """Language and theme picker.

    The dialog previews the chosen theme on itself; nothing is applied to the
    main window until Save emits settings_applied.
    """

    settings_applied = pyqtSignal(str, str)  # lang, theme

    def __init__(self, parent=None, current_lang="en", current_theme="Dark"):
        super().__init__(parent)
        self.setWindowTitle(tr("pref_title"))
        self.setMinimumWidth(280)

        self.lang_combo = QComboBox()
        for code, name in LANGUAGES:
            self.lang_combo.addItem(name, code)
        index = self.lang_combo.findData(current_lang)
        self.lang_combo.setCurrentIndex(max(index, 0))

        self.theme_combo = QComboBox()
        self.theme_combo.addItems(THEMES)
        self.theme_combo.setCurrentIndex(THEMES.index(current_theme) if current_theme in THEMES else 0)
        self.theme_combo.currentTextChanged.connect(self.preview_theme)

        buttons = QDialogButtonBox()
        self.btn_save = buttons.addButton(tr("btn_save"), QDialogButtonBox.ButtonRole.AcceptRole)
        self.btn_cancel = buttons.addButton(tr("btn_cancel"), QDialogButtonBox.ButtonRole.RejectRole)
        buttons.accepted.connect(self.on_save)
        buttons.rejected.connect(self.reject)

        form = QFormLayout(self)
        form.addRow(tr("pref_lang"), self.lang_combo)
        form.addRow(tr("pref_theme"), self.theme_combo)
        form.addRow(buttons)

        self.preview_theme(self.theme_combo.currentText())

    def preview_theme(self, theme):
        self.setStyleSheet(dialog_stylesheet(theme))

    def on_save(self):
        self.settings_applied.emit(self.lang_combo.currentData(), self.theme_combo.currentText())
        self.accept()
