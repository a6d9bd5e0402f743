def make_nodes(*specs):
    """make_nodes((1, 'note'), (2, 'link')) -> snapshot node records."""
    return [{"id": uid, "kind": kind, "label": f"{kind} {uid}"} for uid, kind in specs]


def make_edges(*pairs):
    return [{"fromId": u, "toId": v} for u, v in pairs]


def place(engine, **positions):
    """place(engine, n1=(x, y)) pins node 1 at (x, y) with zero velocity."""
    for key, (x, y) in positions.items():
        node = engine.nodes[int(key.lstrip("n"))]
        node.x, node.y = float(x), float(y)
        node.vx = node.vy = 0.0
