import math


class InteractionController:
    """Turns pointer gestures into drags, clicks and hover updates.

    Two states: idle (dragging is None) and dragging. A press on a node starts
    a drag; the release is a click if the pointer travelled less than
    click_threshold pixels, otherwise it was a reposition and nothing is
    selected. on_click(uid) is called for resolved clicks only.
    """

    def __init__(self, engine, on_click=None, hit_padding=6.0, click_threshold=5.0):
        self.engine = engine
        self.on_click = on_click
        self.hit_padding = hit_padding
        self.click_threshold = click_threshold

        self.dragging = None  # uid of the node under the gesture
        self.press_pos = None
        self.hovered = None

    @property
    def hit_radius(self):
        return self.engine.config.node_radius + self.hit_padding

    def hit_test(self, x, y):
        node = self.engine.node_at(x, y, self.hit_radius)
        return node.uid if node is not None else None

    def pointer_down(self, x, y, touch=False):
        uid = self.hit_test(x, y)
        if touch:
            # No hover on touch screens; show labels for the touched node instead
            self.hovered = uid
        if uid is None:
            return False

        self.engine.begin_drag(uid)
        self.dragging = uid
        self.press_pos = (x, y)
        return True

    def pointer_move(self, x, y, touch=False):
        if not touch:
            self.hovered = self.hit_test(x, y)

        if self.dragging is not None:
            self.engine.drag_to(x, y)

    def pointer_up(self, x, y, touch=False):
        """Ends the gesture. Returns the clicked uid, or None for drags/misses."""
        uid = self.dragging
        clicked = None
        if uid is not None:
            px, py = self.press_pos
            if math.hypot(x - px, y - py) < self.click_threshold:
                clicked = uid
        self._release()

        if touch:
            self.hovered = None
        if clicked is not None and self.on_click is not None:
            self.on_click(clicked)
        return clicked

    def pointer_leave(self):
        """Pointer left the surface or the gesture was cancelled."""
        self._release()
        self.hovered = None

    def reset(self):
        self.dragging = None
        self.press_pos = None
        self.hovered = None

    def _release(self):
        if self.dragging is not None:
            self.engine.end_drag()
        self.dragging = None
        self.press_pos = None
