import logging
import math
import random

import networkx as nx

logger = logging.getLogger(__name__)

KINDS = ("note", "link", "highlight", "person", "company")


class DuplicateNodeError(ValueError):
    """Raised when a snapshot lists the same entity id twice."""


class ForceConfig:
    """Tuning constants for the layout simulation.

    Defaults give the production look: a loose layout that settles within a
    few hundred ticks and keeps responding gently afterwards.

    repulsion       -- Coulomb-like push between every pair (force = k / dist)
    spring_length   -- rest length of an edge spring, in pixels
    spring_k        -- spring stiffness
    gravity         -- pull towards the viewport center
    damping         -- velocity multiplier applied every tick (< 1)
    alpha_initial   -- temperature at tick 0
    alpha_decay     -- multiplicative decay per tick
    alpha_min       -- temperature floor (0 lets forces vanish entirely)
    min_distance    -- distances below this are floored before dividing
    node_radius     -- visual radius; nodes are clamped this far inside bounds
    spawn_fraction  -- spawn disc radius as a fraction of the smaller dimension
    """

    def __init__(self, repulsion=150.0, spring_length=80.0, spring_k=0.03,
                 gravity=0.005, damping=0.85, alpha_initial=0.3,
                 alpha_decay=0.995, alpha_min=0.01, min_distance=1.0,
                 node_radius=10.0, spawn_fraction=0.3):
        if not 0 < damping < 1:
            raise ValueError("damping must be between 0 and 1")
        if not 0 < alpha_decay <= 1:
            raise ValueError("alpha_decay must be in (0, 1]")
        if min_distance <= 0:
            raise ValueError("min_distance must be positive")
        self.repulsion = repulsion
        self.spring_length = spring_length
        self.spring_k = spring_k
        self.gravity = gravity
        self.damping = damping
        self.alpha_initial = alpha_initial
        self.alpha_decay = alpha_decay
        self.alpha_min = alpha_min
        self.min_distance = min_distance
        self.node_radius = node_radius
        self.spawn_fraction = spawn_fraction

    def alpha(self, tick_index):
        return max(self.alpha_min, self.alpha_initial * math.pow(self.alpha_decay, tick_index))


class Node:
    def __init__(self, uid, kind, label, x=0.0, y=0.0):
        self.uid = uid
        self.kind = kind
        self.label = label
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0

    def __repr__(self):
        return f"Node({self.uid!r}, {self.kind!r}, x={self.x:.1f}, y={self.y:.1f})"


class GraphEngine:
    """Force-directed layout over a set of typed entities.

    Coordinates are viewport pixels: (0, 0) is the top-left corner and the
    center of gravity is the middle of the current bounds.
    """

    def __init__(self, config=None, width=400, height=400, seed=None):
        self.config = config or ForceConfig()
        self.width = float(width)
        self.height = float(height)
        self.rng = random.Random(seed)

        self.nodes = {}  # uid -> Node
        self.edges = []  # (uid1, uid2), undirected
        self.adjacency = {}  # uid -> set(uid)
        self.tick_count = 0
        self.dragged_uid = None

    # --- Loading ---

    def load(self, nodes, edges):
        """Replaces the current graph with a snapshot.

        nodes -- iterable of mappings with 'id', 'kind' and 'label'
        edges -- iterable of mappings with 'fromId' and 'toId'

        Duplicate ids raise DuplicateNodeError and leave the engine untouched.
        Edges whose endpoints are missing are dropped.
        """
        graph = nx.Graph()
        for record in nodes:
            uid = record["id"]
            if uid in graph:
                raise DuplicateNodeError(f"duplicate node id {uid!r}")
            graph.add_node(uid, kind=record.get("kind"), label=record.get("label") or "")

        dropped = 0
        for record in edges:
            u, v = record["fromId"], record["toId"]
            if u not in graph or v not in graph or u == v:
                dropped += 1
                continue
            graph.add_edge(u, v)

        if dropped:
            logger.info("Dropped %d edge(s) with missing or identical endpoints", dropped)
        self.load_from_networkx(graph)

    def load_from_networkx(self, nx_graph):
        # Directed inputs are flattened; layout only cares about adjacency
        graph = nx_graph.to_undirected(as_view=True) if nx_graph.is_directed() else nx_graph

        self.nodes = {}
        self.edges = []
        self.adjacency = {}
        self.tick_count = 0
        self.dragged_uid = None

        for uid, data in graph.nodes(data=True):
            x, y = self._spawn_position()
            self.nodes[uid] = Node(uid, data.get("kind"), data.get("label", ""), x, y)
            self.adjacency[uid] = set()

        for u, v in graph.edges():
            if u == v:
                continue
            self.edges.append((u, v))
            self.adjacency[u].add(v)
            self.adjacency[v].add(u)

        logger.info("Loaded graph: %d nodes, %d edges", len(self.nodes), len(self.edges))

    def _spawn_position(self):
        # Uniform over a disc around the center so nothing starts stacked
        cx, cy = self.center
        radius = self.config.spawn_fraction * min(self.width, self.height)
        angle = self.rng.uniform(0, 2 * math.pi)
        r = radius * math.sqrt(self.rng.random())
        return cx + r * math.cos(angle), cy + r * math.sin(angle)

    # --- Queries ---

    @property
    def center(self):
        return self.width / 2, self.height / 2

    def neighbors(self, uid):
        return self.adjacency.get(uid, set())

    def node_at(self, x, y, hit_radius):
        """Returns the closest node within hit_radius of (x, y), or None."""
        best = None
        best_dist_sq = hit_radius * hit_radius
        for node in self.nodes.values():
            dx = node.x - x
            dy = node.y - y
            dist_sq = dx * dx + dy * dy
            if dist_sq <= best_dist_sq:
                best = node
                best_dist_sq = dist_sq
        return best

    # --- Viewport ---

    def set_bounds(self, width, height):
        """Publishes new viewport bounds.

        Positions are kept as they are; gravity drifts the layout towards the
        new center. The tick counter restarts so the layout reheats.
        """
        self.width = float(width)
        self.height = float(height)
        self.tick_count = 0

    def reheat(self):
        self.tick_count = 0

    def clamp(self, x, y):
        r = self.config.node_radius
        # Viewports smaller than a node collapse onto the center line
        lo_x, hi_x = r, max(r, self.width - r)
        lo_y, hi_y = r, max(r, self.height - r)
        return min(max(x, lo_x), hi_x), min(max(y, lo_y), hi_y)

    # --- Dragging ---

    def begin_drag(self, uid):
        node = self.nodes.get(uid)
        if node is None:
            return None
        self.dragged_uid = uid
        node.vx = 0.0
        node.vy = 0.0
        return node

    def drag_to(self, x, y):
        node = self.nodes.get(self.dragged_uid)
        if node is None:
            return None
        node.x, node.y = self.clamp(x, y)
        node.vx = 0.0
        node.vy = 0.0
        return node

    def end_drag(self):
        self.dragged_uid = None

    # --- Simulation ---

    def tick(self):
        """Advances the layout by one frame.

        Returns the summed displacement of all free nodes, which callers can
        use to tell whether the layout has settled.
        """
        if not self.nodes:
            return 0.0

        cfg = self.config
        alpha = cfg.alpha(self.tick_count)
        self.tick_count += 1

        node_items = list(self.nodes.values())
        forces = {uid: [0.0, 0.0] for uid in self.nodes}

        # 1. Repulsion (all pairs), F = k * alpha / dist
        for i in range(len(node_items)):
            n1 = node_items[i]
            for j in range(i + 1, len(node_items)):
                n2 = node_items[j]

                dx = n2.x - n1.x
                dy = n2.y - n1.y
                dist = math.sqrt(dx * dx + dy * dy)
                if dist < cfg.min_distance:
                    dist = cfg.min_distance

                f = cfg.repulsion * alpha / dist
                fx = (dx / dist) * f
                fy = (dy / dist) * f

                forces[n1.uid][0] -= fx
                forces[n1.uid][1] -= fy
                forces[n2.uid][0] += fx
                forces[n2.uid][1] += fy

        # 2. Spring attraction (edges), F = k * (dist - rest) * alpha
        for u, v in self.edges:
            n1 = self.nodes[u]
            n2 = self.nodes[v]

            dx = n2.x - n1.x
            dy = n2.y - n1.y
            dist = math.sqrt(dx * dx + dy * dy)
            if dist < cfg.min_distance:
                dist = cfg.min_distance

            f = (dist - cfg.spring_length) * cfg.spring_k * alpha
            fx = (dx / dist) * f
            fy = (dy / dist) * f

            forces[n1.uid][0] += fx
            forces[n1.uid][1] += fy
            forces[n2.uid][0] -= fx
            forces[n2.uid][1] -= fy

        # 3. Center gravity
        cx, cy = self.center
        for n in node_items:
            forces[n.uid][0] += (cx - n.x) * cfg.gravity * alpha
            forces[n.uid][1] += (cy - n.y) * cfg.gravity * alpha

        # 4. Integration; the dragged node belongs to the pointer
        moved = 0.0
        for n in node_items:
            if n.uid == self.dragged_uid:
                continue
            fx, fy = forces[n.uid]

            n.vx = (n.vx + fx) * cfg.damping
            n.vy = (n.vy + fy) * cfg.damping

            old_x, old_y = n.x, n.y
            n.x, n.y = self.clamp(n.x + n.vx, n.y + n.vy)
            moved += math.hypot(n.x - old_x, n.y - old_y)

        return moved
