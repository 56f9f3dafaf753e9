"""Identity registry — HOLON.md records on disk.

Layout (under any scanned root):
    <root>/
    ├── .holon/                        # Convention directory, always scanned
    │   └── swift-transcriber/
    │       └── HOLON.md               # YAML frontmatter + markdown body
    ├── tools/prober/HOLON.md          # Documents may live anywhere...
    └── .cache/x/HOLON.md              # ...except other hidden directories

A file path *is* a record's location; there is no separate index.
"""
