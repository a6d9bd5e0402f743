"""
Snapshot loading and entity detail lookup.

A snapshot is the JSON document the dashboard hands to the graph view:

    {
      "nodes": [{"id": 1, "kind": "note", "label": "Reading list",
                 "url": null, "content": "...", "tags": ["books"]}],
      "edges": [{"fromId": 1, "toId": 2}]
    }

The database export uses "type"/"title" instead of "kind"/"label"; both
spellings are accepted.
"""

import json
import logging
import time

logger = logging.getLogger(__name__)

_EDGE_KEYS = (("fromId", "toId"), ("from", "to"), ("source", "target"))


class SnapshotError(ValueError):
    """Raised for documents that are not a usable graph snapshot."""


class EntityDetail:
    def __init__(self, uid, kind, title, url=None, source=None, content=None, tags=None, linked=None):
        self.uid = uid
        self.kind = kind
        self.title = title
        self.url = url
        self.source = source
        self.content = content
        self.tags = list(tags or [])
        self.linked = list(linked or [])  # [{'id', 'kind', 'label'}]

    def __repr__(self):
        return f"EntityDetail({self.uid!r}, {self.title!r}, linked={len(self.linked)})"


class Snapshot:
    def __init__(self, nodes, edges, entries):
        self.nodes = nodes      # [{'id', 'kind', 'label'}]
        self.edges = edges      # [{'fromId', 'toId'}]
        self.entries = entries  # id -> full record

    def __len__(self):
        return len(self.nodes)


def _node_id(value, where):
    # bool is an int subclass but never a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"{where}: id must be an integer, got {value!r}")
    return value


def _parse_node(record, index):
    where = f"nodes[{index}]"
    if not isinstance(record, dict):
        raise SnapshotError(f"{where}: expected an object")
    if "id" not in record:
        raise SnapshotError(f"{where}: missing 'id'")
    uid = _node_id(record["id"], where)

    tags = record.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise SnapshotError(f"{where}: 'tags' must be a list of strings")
    for key in ("url", "source", "content"):
        if record.get(key) is not None and not isinstance(record[key], str):
            raise SnapshotError(f"{where}: '{key}' must be a string")

    # Anything but a string degrades to the neutral unknown kind
    kind = record.get("kind", record.get("type"))
    if not isinstance(kind, str):
        kind = None

    return {
        "id": uid,
        "kind": kind,
        "label": str(record.get("label", record.get("title")) or ""),
        "url": record.get("url"),
        "source": record.get("source"),
        "content": record.get("content"),
        "tags": tags,
    }


def _parse_edge(record, index):
    where = f"edges[{index}]"
    if not isinstance(record, dict):
        raise SnapshotError(f"{where}: expected an object")
    for from_key, to_key in _EDGE_KEYS:
        if from_key in record and to_key in record:
            return {
                "fromId": _node_id(record[from_key], where),
                "toId": _node_id(record[to_key], where),
            }
    raise SnapshotError(f"{where}: missing 'fromId'/'toId'")


def parse_snapshot(document):
    """Validates a decoded snapshot document and returns a Snapshot.

    Duplicate node ids are not checked here; GraphEngine.load rejects them.
    """
    if not isinstance(document, dict):
        raise SnapshotError("snapshot must be a JSON object")
    raw_nodes = document.get("nodes")
    if not isinstance(raw_nodes, list):
        raise SnapshotError("snapshot is missing a 'nodes' list")
    raw_edges = document.get("edges")
    if raw_edges is None:
        raw_edges = []
    if not isinstance(raw_edges, list):
        raise SnapshotError("'edges' must be a list")

    records = [_parse_node(r, i) for i, r in enumerate(raw_nodes)]
    edges = [_parse_edge(r, i) for i, r in enumerate(raw_edges)]

    nodes = [{"id": r["id"], "kind": r["kind"], "label": r["label"]} for r in records]
    entries = {}
    for r in records:
        entries.setdefault(r["id"], r)
    return Snapshot(nodes, edges, entries)


def load_snapshot(path):
    with open(path, "r", encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{path}: invalid JSON ({e})") from e
    snapshot = parse_snapshot(document)
    logger.info("Read snapshot %s: %d nodes, %d edges", path, len(snapshot.nodes), len(snapshot.edges))
    return snapshot


class SnapshotDetailSource:
    """Answers detail requests from an in-memory snapshot.

    fetch() is called from a worker thread; it only reads the snapshot.
    """

    def __init__(self, snapshot, delay=0.0):
        self.snapshot = snapshot
        self.delay = delay

    def fetch(self, uid):
        if self.delay:
            time.sleep(self.delay)

        entry = self.snapshot.entries.get(uid)
        if entry is None:
            return None

        # Outgoing first, then incoming, first occurrence wins
        outgoing = [e["toId"] for e in self.snapshot.edges if e["fromId"] == uid]
        incoming = [e["fromId"] for e in self.snapshot.edges if e["toId"] == uid]

        seen = set()
        linked = []
        for other in outgoing + incoming:
            if other in seen or other == uid:
                continue
            other_entry = self.snapshot.entries.get(other)
            if other_entry is None:
                continue
            seen.add(other)
            linked.append({"id": other, "kind": other_entry["kind"], "label": other_entry["label"]})

        return EntityDetail(
            uid,
            entry["kind"],
            entry["label"],
            url=entry.get("url"),
            source=entry.get("source"),
            content=entry.get("content"),
            tags=entry.get("tags"),
            linked=linked,
        )
