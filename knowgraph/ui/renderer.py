from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QFontMetricsF, QPolygonF

KIND_COLORS = {
    "note": "#8b5cf6",       # purple
    "link": "#3b82f6",       # blue
    "highlight": "#f59e0b",  # amber
    "person": "#10b981",     # emerald
    "company": "#f43f5e",    # rose
}
FALLBACK_COLOR = "#64748b"  # slate

THEMES = {
    "Dark": {
        "background": "#121212",
        "edge": "#555555",
        "node_border": "#ffffff",
        "chip": "#f1f5f9",
        "chip_text": "#475569",
        "chip_active": "#1e293b",
        "chip_active_text": "#ffffff",
        "hint": "#888888",
    },
    "Light": {
        "background": "#f8fafc",
        "edge": "#e2e8f0",
        "node_border": "#ffffff",
        "chip": "#f1f5f9",
        "chip_text": "#475569",
        "chip_active": "#1e293b",
        "chip_active_text": "#ffffff",
        "hint": "#94a3b8",
    },
}


def kind_color(kind):
    if not isinstance(kind, str):
        return QColor(FALLBACK_COLOR)
    return QColor(KIND_COLORS.get(kind, FALLBACK_COLOR))


def truncate_label(label, max_chars=25, marker="..."):
    if len(label) > max_chars:
        return label[:max_chars] + marker
    return label


class GraphRenderer:
    """Paints one frame of the graph: edges, then nodes, then labels.

    Read-only with respect to the engine; safe to call every frame.
    """

    def __init__(self, theme="Dark", max_label_chars=25):
        self.max_label_chars = max_label_chars
        self.font = QFont("Segoe UI", 8)
        self.set_theme(theme)

    def set_theme(self, theme):
        self.theme = theme if theme in THEMES else "Dark"
        self.colors = {k: QColor(v) for k, v in THEMES[self.theme].items()}

    def render(self, painter, engine, width, height, hovered=None, selected=None, empty_text=None):
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(QRectF(0, 0, width, height), self.colors["background"])

        if not engine.nodes:
            if empty_text:
                painter.setPen(self.colors["hint"])
                painter.setFont(self.font)
                painter.drawText(QRectF(0, 0, width, height), Qt.AlignmentFlag.AlignCenter, empty_text)
            return

        self._draw_edges(painter, engine)
        self._draw_nodes(painter, engine, hovered, selected)
        if hovered in engine.nodes:
            self._draw_labels(painter, engine, hovered)

    # --- Edges ---

    def _draw_edges(self, painter, engine):
        painter.setPen(QPen(self.colors["edge"], 1))
        for u, v in engine.edges:
            n1 = engine.nodes.get(u)
            n2 = engine.nodes.get(v)
            if n1 and n2:
                painter.drawLine(QPointF(n1.x, n1.y), QPointF(n2.x, n2.y))

    # --- Nodes ---

    def _draw_nodes(self, painter, engine, hovered, selected):
        base = engine.config.node_radius
        for node in engine.nodes.values():
            color = kind_color(node.kind)
            active = node.uid == hovered or node.uid == selected
            radius = base + 3 if active else base
            center = QPointF(node.x, node.y)

            # Soft glow
            if active:
                glow = QColor(color)
                glow.setAlpha(48)
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QBrush(glow))
                painter.drawEllipse(center, radius + 4, radius + 4)

            if node.uid == selected:
                pen = QPen(color.darker(160), 3)
            else:
                pen = QPen(self.colors["node_border"], 2)
            painter.setPen(pen)
            painter.setBrush(QBrush(color))
            painter.drawEllipse(center, radius, radius)

            self._draw_glyph(painter, node.kind, node.x, node.y, radius * 0.5)

    def _draw_glyph(self, painter, kind, x, y, s):
        draw = GLYPHS.get(kind) if isinstance(kind, str) else None
        if draw is None:
            return
        pen = QPen(QColor("#ffffff"), max(1.0, s / 4))
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        draw(painter, x, y, s)

    # --- Labels ---

    def _draw_labels(self, painter, engine, hovered):
        painter.setFont(self.font)
        metrics = QFontMetricsF(self.font)
        radius = engine.config.node_radius
        pad_x, pad_y = 4, 2

        uids = [hovered] + sorted(engine.neighbors(hovered), key=str)
        for uid in uids:
            node = engine.nodes.get(uid)
            if node is None:
                continue
            text = truncate_label(node.label, self.max_label_chars)
            tw = metrics.horizontalAdvance(text)
            th = metrics.height()

            chip = QRectF(node.x - tw / 2 - pad_x, node.y - radius - th - pad_y * 2 - 6,
                          tw + pad_x * 2, th + pad_y * 2)
            is_main = uid == hovered
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(self.colors["chip_active" if is_main else "chip"]))
            painter.drawRoundedRect(chip, 6, 6)

            painter.setPen(self.colors["chip_active_text" if is_main else "chip_text"])
            painter.drawText(chip, Qt.AlignmentFlag.AlignCenter, text)


# --- Kind glyphs, drawn in a box of half-size s around (x, y) ---

def _glyph_note(painter, x, y, s):
    # Lines of text
    for dy, w in ((-0.6, 1.0), (0.0, 1.0), (0.6, 0.6)):
        painter.drawLine(QPointF(x - s * 0.8, y + dy * s), QPointF(x - s * 0.8 + 1.6 * s * w, y + dy * s))


def _glyph_link(painter, x, y, s):
    # Two chain rings
    painter.drawEllipse(QPointF(x - s * 0.35, y), s * 0.55, s * 0.4)
    painter.drawEllipse(QPointF(x + s * 0.35, y), s * 0.55, s * 0.4)


def _glyph_highlight(painter, x, y, s):
    painter.setBrush(QBrush(QColor("#ffffff")))
    painter.drawPolygon(QPolygonF([
        QPointF(x, y - s), QPointF(x + s * 0.6, y), QPointF(x, y + s), QPointF(x - s * 0.6, y),
    ]))


def _glyph_person(painter, x, y, s):
    painter.drawEllipse(QPointF(x, y - s * 0.4), s * 0.35, s * 0.35)
    # Shoulders, upper half of an ellipse
    painter.drawArc(QRectF(x - s * 0.8, y + s * 0.1, s * 1.6, s * 1.4), 0, 180 * 16)


def _glyph_company(painter, x, y, s):
    painter.drawRect(QRectF(x - s * 0.6, y - s * 0.8, s * 1.2, s * 1.6))
    painter.drawLine(QPointF(x, y + s * 0.2), QPointF(x, y + s * 0.8))


GLYPHS = {
    "note": _glyph_note,
    "link": _glyph_link,
    "highlight": _glyph_highlight,
    "person": _glyph_person,
    "company": _glyph_company,
}
