#!/usr/bin/env python3
"""
SnipDeck
───────────────────────────────
A minimal web-GUI for the shell commands you keep looking up.

Features:
- Search snippets by command, description and keywords (every word must match).
- Keyboard navigation: Up/Down to move, Enter to copy or select for manual copy.
- Add and Delete snippets.
- Optional auto-copy when a snippet is picked.
- Export the collection as YAML and import YAML collections.

Requirements:
Python dependencies: `pip install flask ruamel.yaml`

Usage:
Run "python snipdeck.py" and it will open your browser automatically.
Snippets live in ~/.config/snipdeck (or %APPDATA%\\snipdeck), override with SNIPDECK_DATA_DIR.
"""
import dataclasses, io, json, logging, os, sys, tempfile, threading, time, webbrowser
from dataclasses import dataclass
from pathlib import Path
from threading import Timer
from flask import Flask, render_template_string, request, jsonify, send_file, current_app
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from werkzeug.utils import secure_filename

def get_data_dir():
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", "")) / "snipdeck"
    return Path.home() / ".config" / "snipdeck"

app = Flask(__name__)
app.config.from_mapping(DATA_DIR=str(get_data_dir()), HOST="0.0.0.0", PORT=3000, OPEN_BROWSER=True)
app.config.from_prefixed_env("SNIPDECK")
app.json.sort_keys = False

yaml = YAML()
yaml.indent(mapping=2, sequence=4, offset=2)

SNIPPETS_FILE = "snippets.json"
SETTINGS_FILE = "settings.json"
MANUAL_COPY_HINT = "Snippet selected - press Cmd/Ctrl+C to copy"


class SnipDeckError(Exception):
    status = 500

class ValidationError(SnipDeckError):
    status = 400

class NotFoundError(SnipDeckError):
    status = 404

class StorageError(SnipDeckError):
    status = 500


# ─── Storage ───────────────────────────────────────────────────────────────

def write_json_atomic(path, data):
    """Write `data` next to `path` first, then swap it in so readers never see half a file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp, path)
    except Exception:
        Path(tmp).unlink(missing_ok=True)
        raise


class SnippetStore:
    """The whole snippet collection, kept as one JSON array on disk."""

    def __init__(self, path):
        self.path = Path(path)

    def list(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            app.logger.debug("No snippets file at %s yet", self.path)
            return []
        except (OSError, ValueError) as e:
            app.logger.warning("Error reading snippets from %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            app.logger.warning("Ignoring %s: expected a JSON array", self.path)
            return []
        return [s for s in data if isinstance(s, dict)]

    def replace_all(self, snippets):
        try:
            write_json_atomic(self.path, list(snippets))
            return True
        except (OSError, TypeError, ValueError) as e:
            app.logger.error("Error writing snippets to %s: %s", self.path, e)
            return False


class SettingsStore:
    """A single preferences object. Missing or unreadable means defaults."""

    def __init__(self, path):
        self.path = Path(path)

    def get(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                settings = json.load(f)
        except (OSError, ValueError):
            return default_settings()
        if not isinstance(settings, dict):
            return default_settings()
        settings.setdefault("autoCopy", False)
        return settings

    def replace(self, settings):
        try:
            write_json_atomic(self.path, settings)
            return True
        except (OSError, TypeError, ValueError) as e:
            app.logger.error("Error writing settings to %s: %s", self.path, e)
            return False


def default_settings():
    return {"autoCopy": False}

def snippet_store():
    return SnippetStore(Path(current_app.config["DATA_DIR"]) / SNIPPETS_FILE)

def settings_store():
    return SettingsStore(Path(current_app.config["DATA_DIR"]) / SETTINGS_FILE)


# ─── Snippets ──────────────────────────────────────────────────────────────

_id_lock = threading.Lock()
_last_id = 0

def new_snippet_id(taken=()):
    """Millisecond timestamp, bumped past the last id handed out and any id in `taken`."""
    global _last_id
    with _id_lock:
        candidate = max(int(time.time() * 1000), _last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        _last_id = candidate
    return str(candidate)

def parse_keywords(keywords):
    if isinstance(keywords, str):
        keywords = keywords.split(",")
    elif not isinstance(keywords, (list, tuple)):
        raise ValidationError("Keywords must be a list or a comma-separated string")
    cleaned = []
    for k in keywords:
        if not isinstance(k, str):
            raise ValidationError("Keywords must be strings")
        k = k.strip()
        if k:
            cleaned.append(k)
    return cleaned

def validate_snippet(command, keywords, description=None):
    """Clean up user input into snippet fields (everything but the id)."""
    if command is not None and not isinstance(command, str):
        raise ValidationError("Command must be a string")
    command = (command or "").strip()
    keywords = parse_keywords(keywords) if keywords is not None else []
    if not command or not keywords:
        raise ValidationError("Command and keywords are required")
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string")
    return {"command": command, "keywords": keywords, "description": (description or "").strip()}

def list_all(store):
    return store.list()

def create_snippet(store, command, keywords, description=None):
    fields = validate_snippet(command, keywords, description)
    snippets = store.list()
    snippet = {"id": new_snippet_id({s.get("id") for s in snippets}), **fields}
    snippets.append(snippet)
    if not store.replace_all(snippets):
        raise StorageError("Failed to save snippet")
    return snippet

def delete_snippet(store, snippet_id):
    snippets = store.list()
    remaining = [s for s in snippets if s.get("id") != snippet_id]
    if len(remaining) == len(snippets):
        raise NotFoundError("Snippet not found")
    if not store.replace_all(remaining):
        raise StorageError("Failed to delete snippet")

def get_settings(store):
    return store.get()

def replace_settings(store, settings):
    if not isinstance(settings, dict):
        raise ValidationError("Settings must be a JSON object")
    if not store.replace(settings):
        raise StorageError("Failed to save settings")
    return settings


# ─── Import / Export ───────────────────────────────────────────────────────

def read_snippet_pack(text):
    """Parse an uploaded YAML pack: a list of snippets or a mapping with a `snippets` list."""
    try:
        data = yaml.load(text)
    except YAMLError as e:
        raise ValidationError(f"Invalid YAML file: {e}")
    if isinstance(data, dict):
        data = data.get("snippets")
    if not isinstance(data, list):
        raise ValidationError("No snippets found in file")
    return data

def import_snippets(store, entries):
    snippets = store.list()
    taken = {s.get("id") for s in snippets}
    imported = skipped = 0
    for entry in entries:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        try:
            fields = validate_snippet(entry.get("command"), entry.get("keywords"), entry.get("description"))
        except ValidationError as e:
            app.logger.warning("Skipping imported snippet %r: %s", entry.get("command"), e)
            skipped += 1
            continue
        snippet_id = new_snippet_id(taken)
        taken.add(snippet_id)
        snippets.append({"id": snippet_id, **fields})
        imported += 1
    if imported and not store.replace_all(snippets):
        raise StorageError("Failed to save imported snippets")
    return imported, skipped

def dump_snippet_pack(snippets):
    stream = io.StringIO()
    yaml.dump({"snippets": list(snippets)}, stream)
    return stream.getvalue()


# ─── Search & navigation ───────────────────────────────────────────────────

def searchable_text(snippet):
    parts = [snippet.get("command") or "", snippet.get("description") or ""]
    parts.extend(snippet.get("keywords") or [])
    return " ".join(str(p) for p in parts).lower()

def filter_snippets(snippets, query):
    """Snippets containing every whitespace-separated word of `query`, in their original order."""
    query = (query or "").lower().strip()
    if not query:
        return list(snippets)
    words = query.split()
    return [s for s in snippets if all(w in searchable_text(s) for w in words)]


@dataclass(frozen=True)
class NavState:
    snippets: tuple = ()
    query: str = ""
    filtered: tuple = ()
    selected_index: int = -1
    auto_copy: bool = False


def _refilter(state, **changes):
    state = dataclasses.replace(state, **changes)
    filtered = tuple(filter_snippets(state.snippets, state.query))
    return dataclasses.replace(state, filtered=filtered, selected_index=0 if filtered else -1)

def navigate(state, action):
    """Apply one UI action. Returns the new state and a list of effects to run.

    Effects are tuples: ("copy", text), ("mark", index), ("notify", message)
    and ("save_settings", settings). The browser client mirrors this reducer.
    """
    kind = action["type"]
    count = len(state.filtered)
    if kind == "load":
        return _refilter(state, snippets=tuple(action["snippets"])), []
    if kind == "search":
        return _refilter(state, query=action.get("query") or ""), []
    if kind == "settings":
        return dataclasses.replace(state, auto_copy=bool(action["settings"].get("autoCopy"))), []
    if kind == "toggle_auto_copy":
        enabled = bool(action["enabled"])
        state = dataclasses.replace(state, auto_copy=enabled)
        return state, [("save_settings", {"autoCopy": enabled}),
                       ("notify", f"Auto-copy {'enabled' if enabled else 'disabled'}")]
    if kind == "down":
        if not count:
            return state, []
        return dataclasses.replace(state, selected_index=min(state.selected_index + 1, count - 1)), []
    if kind == "up":
        if not count:
            return state, []
        return dataclasses.replace(state, selected_index=max(state.selected_index - 1, 0)), []
    if kind == "pick":
        index = action["index"]
        state = dataclasses.replace(state, selected_index=index)
        if state.auto_copy:
            return state, [("copy", state.filtered[index]["command"])]
        return state, []
    if kind == "confirm":
        if state.selected_index < 0:
            return state, []
        if state.auto_copy:
            return state, [("copy", state.filtered[state.selected_index]["command"])]
        return state, [("mark", state.selected_index), ("notify", MANUAL_COPY_HINT)]
    raise ValueError(f"Unknown action: {kind}")

def initial_state(snippets, settings):
    state, _ = navigate(NavState(), {"type": "settings", "settings": settings})
    state, _ = navigate(state, {"type": "load", "snippets": snippets})
    return state

def state_payload(state):
    """Client-side shape of a NavState."""
    return {
        "snippets": list(state.snippets),
        "query": state.query,
        "filtered": list(state.filtered),
        "selectedIndex": state.selected_index,
        "autoCopy": state.auto_copy,
    }


TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>SnipDeck</title>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=IBM+Plex+Sans:wght@400;500;600&family=JetBrains+Mono:wght@500&display=swap" rel="stylesheet">
<style>
:root {
    --bg-primary: #0d0d14;
    --bg-secondary: #16161f;
    --bg-card: #1e1e2a;
    --bg-card-hover: #262636;
    --text-primary: #e8e8ed;
    --text-secondary: #8b8b9e;
    --text-muted: #5a5a6e;
    --accent-blue: #3b82f6;
    --accent-blue-hover: #2563eb;
    --accent-green: #22c55e;
    --accent-red: #ef4444;
    --accent-red-hover: #dc2626;
    --accent-purple: #a855f7;
    --border-color: #2a2a3a;
    --badge-bg: #2a2a3a;
    --badge-text: #a0a0b8;
    --shadow: 0 4px 20px rgba(0, 0, 0, 0.4);
    --radius: 8px;
    --radius-lg: 12px;
}

* { box-sizing: border-box; margin: 0; padding: 0; }

body {
    font-family: 'IBM Plex Sans', -apple-system, BlinkMacSystemFont, sans-serif;
    background: var(--bg-primary);
    color: var(--text-primary);
    min-height: 100vh;
    line-height: 1.5;
}

.container { max-width: 960px; margin: 0 auto; padding: 24px 32px; }

header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    padding-bottom: 24px;
    margin-bottom: 24px;
    border-bottom: 1px solid var(--border-color);
}

.header-left { display: flex; align-items: baseline; gap: 12px; }
.logo { font-size: 1.5rem; font-weight: 600; color: var(--text-primary); text-decoration: none; }
.logo:hover { color: var(--accent-blue); }
.header-right { display: flex; align-items: center; gap: 12px; }

.search-input {
    width: 100%;
    padding: 14px 18px;
    margin-bottom: 12px;
    background: var(--bg-secondary);
    border: 1px solid var(--border-color);
    border-radius: var(--radius);
    color: var(--text-primary);
    font-size: 1rem;
    font-family: inherit;
    transition: all 0.2s ease;
}

.search-input::placeholder { color: var(--text-muted); }
.search-input:focus { outline: none; border-color: var(--accent-blue); background: var(--bg-card); }

.controls-bar { display: flex; align-items: center; gap: 12px; margin-bottom: 20px; }
.result-count { font-size: 0.9rem; color: var(--text-secondary); }
.hint { font-size: 0.8rem; color: var(--text-muted); margin-left: auto; }

.toggle { display: flex; align-items: center; gap: 8px; font-size: 0.9rem; color: var(--text-secondary); cursor: pointer; }
.toggle input { width: 18px; height: 18px; accent-color: var(--accent-blue); cursor: pointer; }

.btn {
    padding: 10px 18px;
    border-radius: var(--radius);
    border: none;
    font-size: 0.9rem;
    font-weight: 500;
    font-family: inherit;
    cursor: pointer;
    transition: all 0.2s ease;
    display: inline-flex;
    align-items: center;
    gap: 8px;
    text-decoration: none;
}

.btn-primary { background: var(--accent-blue); color: white; }
.btn-primary:hover { background: var(--accent-blue-hover); transform: translateY(-1px); }
.btn-secondary { background: var(--bg-card); color: var(--text-primary); border: 1px solid var(--border-color); }
.btn-secondary:hover { background: var(--bg-card-hover); border-color: var(--text-muted); }
.btn-success { background: var(--accent-green); color: white; }
.btn-danger { background: var(--accent-red); color: white; }
.btn-danger:hover { background: var(--accent-red-hover); }
.btn-sm { padding: 6px 12px; font-size: 0.8rem; }

#snippet-list { display: flex; flex-direction: column; gap: 10px; }

.snippet-card {
    background: var(--bg-card);
    border: 1px solid var(--border-color);
    border-radius: var(--radius-lg);
    padding: 16px 20px;
    cursor: pointer;
    transition: all 0.2s ease;
}

.snippet-card:hover { background: var(--bg-card-hover); border-color: var(--text-muted); }
.snippet-card.selected { border-color: var(--accent-purple); background: rgba(168, 85, 247, 0.1); }

.snippet-header { display: flex; justify-content: space-between; align-items: flex-start; gap: 12px; }
.snippet-command { font-family: 'JetBrains Mono', monospace; font-weight: 500; color: var(--accent-blue); white-space: pre-wrap; word-break: break-all; }
.snippet-description { font-size: 0.9rem; color: var(--text-secondary); margin-top: 6px; }
.snippet-keywords { display: flex; gap: 6px; flex-wrap: wrap; margin-top: 10px; }
.keyword-tag { padding: 3px 8px; font-size: 0.75rem; font-weight: 500; border-radius: 4px; background: var(--badge-bg); color: var(--badge-text); }

.snippet-actions { opacity: 0; transition: opacity 0.2s ease; }
.snippet-card:hover .snippet-actions, .snippet-card.selected .snippet-actions { opacity: 1; }

.empty-state { display: none; text-align: center; padding: 80px 20px; color: var(--text-secondary); }
.empty-state.visible { display: block; }
.empty-state h2 { font-size: 1.5rem; color: var(--text-primary); margin-bottom: 12px; }

.notification {
    position: fixed;
    bottom: 24px;
    right: 24px;
    padding: 14px 18px;
    border-radius: var(--radius);
    font-weight: 500;
    box-shadow: var(--shadow);
    opacity: 0;
    transform: translateY(10px);
    pointer-events: none;
    transition: all 0.2s ease;
    z-index: 2000;
}

.notification.visible { opacity: 1; transform: translateY(0); }
.notification.success { background: rgba(34, 197, 94, 0.15); border: 1px solid rgba(34, 197, 94, 0.3); color: var(--accent-green); }
.notification.error { background: rgba(239, 68, 68, 0.15); border: 1px solid rgba(239, 68, 68, 0.3); color: var(--accent-red); }

.form-group { margin-bottom: 20px; }
.form-label { display: block; font-size: 0.9rem; font-weight: 500; color: var(--text-secondary); margin-bottom: 8px; }

.form-input, .form-textarea {
    width: 100%;
    padding: 12px 16px;
    background: var(--bg-secondary);
    border: 1px solid var(--border-color);
    border-radius: var(--radius);
    color: var(--text-primary);
    font-size: 0.95rem;
    font-family: inherit;
}

.form-textarea { font-family: 'JetBrains Mono', monospace; font-size: 0.9rem; resize: vertical; min-height: 90px; }
.form-input:focus, .form-textarea:focus { outline: none; border-color: var(--accent-blue); background: var(--bg-card); }
.form-note { font-size: 0.8rem; color: var(--text-muted); margin-top: 8px; }

/* Modal */
.modal-overlay {
    display: none;
    position: fixed;
    top: 0;
    left: 0;
    right: 0;
    bottom: 0;
    background: rgba(0, 0, 0, 0.7);
    z-index: 1000;
    align-items: center;
    justify-content: center;
}

.modal-overlay.active { display: flex; }

.modal {
    background: var(--bg-card);
    border: 1px solid var(--border-color);
    border-radius: var(--radius-lg);
    padding: 24px;
    max-width: 500px;
    width: 90%;
    max-height: 80vh;
    overflow-y: auto;
}

.modal-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 20px; }
.modal-title { font-size: 1.25rem; font-weight: 600; }
.modal-close { background: none; border: none; color: var(--text-secondary); font-size: 1.5rem; cursor: pointer; }
.modal-actions { display: flex; gap: 12px; margin-top: 24px; justify-content: flex-end; }

/* Dropdown menu */
.dropdown { position: relative; }

.dropdown-menu {
    display: none;
    position: absolute;
    top: 100%;
    right: 0;
    margin-top: 8px;
    background: var(--bg-card);
    border: 1px solid var(--border-color);
    border-radius: var(--radius);
    min-width: 180px;
    z-index: 100;
    box-shadow: var(--shadow);
}

.dropdown-menu.active { display: block; }

.dropdown-item {
    display: flex;
    align-items: center;
    gap: 10px;
    padding: 12px 16px;
    color: var(--text-primary);
    text-decoration: none;
    cursor: pointer;
    border: none;
    background: none;
    width: 100%;
    font-size: 0.9rem;
    font-family: inherit;
}

.dropdown-item:hover { background: var(--bg-card-hover); }

@media (max-width: 768px) {
    .container { padding: 16px; }
    header { flex-direction: column; gap: 16px; align-items: flex-start; }
    .snippet-actions { opacity: 1; }
}
</style>
</head>
<body>
<div class="container">
<header>
<div class="header-left">
    <a href="/" class="logo">&gt;_ SnipDeck</a>
</div>
<div class="header-right">
    <label class="toggle"><input type="checkbox" id="auto-copy-toggle"> Auto-copy</label>
    <button class="btn btn-primary" id="add-btn">+ Add New</button>
    <div class="dropdown">
        <button class="btn btn-secondary" id="menu-btn">More</button>
        <div class="dropdown-menu" id="menu-dropdown">
            <button class="dropdown-item" onclick="openModal('import-modal')">Import YAML</button>
            <a class="dropdown-item" href="/api/snippets/export">Export YAML</a>
        </div>
    </div>
</div>
</header>

<main>
    <input type="text" id="search-input" class="search-input" placeholder="Search commands, descriptions, keywords" autocomplete="off">
    <div class="controls-bar">
        <span id="result-count" class="result-count"></span>
        <span class="hint">&uarr;/&darr; to move, Enter to copy</span>
    </div>
    <div id="snippet-list"></div>
    <div id="empty-state" class="empty-state">
        <h2>No snippets found</h2>
        <p>Click <strong>+ Add New</strong> to save a command, or try another search.</p>
    </div>
</main>
</div>

<!-- Add Snippet Modal -->
<div class="modal-overlay" id="add-modal">
    <div class="modal">
        <div class="modal-header">
            <h2 class="modal-title">Add Snippet</h2>
            <button type="button" class="modal-close" onclick="closeModal('add-modal')">&times;</button>
        </div>
        <form id="snippet-form">
            <div class="form-group">
                <label class="form-label" for="command-input">Command</label>
                <textarea id="command-input" class="form-textarea" placeholder="git log --oneline --graph" required></textarea>
            </div>
            <div class="form-group">
                <label class="form-label" for="keywords-input">Keywords</label>
                <input type="text" id="keywords-input" class="form-input" placeholder="git, log, history" required>
                <p class="form-note">Separate keywords with commas</p>
            </div>
            <div class="form-group">
                <label class="form-label" for="description-input">Description (optional)</label>
                <input type="text" id="description-input" class="form-input">
            </div>
            <div class="modal-actions">
                <button type="button" class="btn btn-secondary" onclick="closeModal('add-modal')">Cancel</button>
                <button type="submit" class="btn btn-primary">Save Snippet</button>
            </div>
        </form>
    </div>
</div>

<!-- Import Modal -->
<div class="modal-overlay" id="import-modal">
    <div class="modal">
        <div class="modal-header">
            <h2 class="modal-title">Import Snippets</h2>
            <button type="button" class="modal-close" onclick="closeModal('import-modal')">&times;</button>
        </div>
        <form id="import-form">
            <div class="form-group">
                <label class="form-label" for="import-file">Select YAML file</label>
                <input type="file" id="import-file" name="file" class="form-input" accept=".yml,.yaml" required>
                <p class="form-note">Imported snippets are added to your collection with new ids</p>
            </div>
            <div class="modal-actions">
                <button type="button" class="btn btn-secondary" onclick="closeModal('import-modal')">Cancel</button>
                <button type="submit" class="btn btn-success">Import</button>
            </div>
        </form>
    </div>
</div>

<div id="notification" class="notification"></div>

<script>
(function() {
    const MANUAL_COPY_HINT = {{ hint|tojson }};
    let state = {{ state|tojson }};
    let notificationTimer = null;

    const searchInput = document.getElementById('search-input');
    const snippetList = document.getElementById('snippet-list');
    const emptyState = document.getElementById('empty-state');
    const resultCount = document.getElementById('result-count');
    const autoCopyToggle = document.getElementById('auto-copy-toggle');
    const notification = document.getElementById('notification');
    const menuBtn = document.getElementById('menu-btn');
    const menuDropdown = document.getElementById('menu-dropdown');

    // Search & navigation, same rules as navigate() on the server
    function searchableText(snippet) {
        return [snippet.command || '', snippet.description || '', ...(snippet.keywords || [])].join(' ').toLowerCase();
    }

    function filterSnippets(snippets, query) {
        query = (query || '').toLowerCase().trim();
        if (!query) return snippets.slice();
        const words = query.split(/\\s+/);
        return snippets.filter(s => {
            const text = searchableText(s);
            return words.every(w => text.includes(w));
        });
    }

    function refilter(current, changes) {
        const next = Object.assign({}, current, changes);
        next.filtered = filterSnippets(next.snippets, next.query);
        next.selectedIndex = next.filtered.length > 0 ? 0 : -1;
        return next;
    }

    function reduce(current, action) {
        const count = current.filtered.length;
        switch (action.type) {
            case 'load':
                return { state: refilter(current, { snippets: action.snippets }), effects: [] };
            case 'search':
                return { state: refilter(current, { query: action.query || '' }), effects: [] };
            case 'toggle_auto_copy':
                return {
                    state: Object.assign({}, current, { autoCopy: action.enabled }),
                    effects: [
                        { type: 'save_settings', settings: { autoCopy: action.enabled } },
                        { type: 'notify', message: `Auto-copy ${action.enabled ? 'enabled' : 'disabled'}` }
                    ]
                };
            case 'down':
                if (!count) return { state: current, effects: [] };
                return { state: Object.assign({}, current, { selectedIndex: Math.min(current.selectedIndex + 1, count - 1) }), effects: [] };
            case 'up':
                if (!count) return { state: current, effects: [] };
                return { state: Object.assign({}, current, { selectedIndex: Math.max(current.selectedIndex - 1, 0) }), effects: [] };
            case 'pick': {
                const next = Object.assign({}, current, { selectedIndex: action.index });
                const effects = next.autoCopy ? [{ type: 'copy', text: next.filtered[action.index].command }] : [];
                return { state: next, effects: effects };
            }
            case 'confirm':
                if (current.selectedIndex < 0) return { state: current, effects: [] };
                if (current.autoCopy) {
                    return { state: current, effects: [{ type: 'copy', text: current.filtered[current.selectedIndex].command }] };
                }
                return { state: current, effects: [{ type: 'mark', index: current.selectedIndex }, { type: 'notify', message: MANUAL_COPY_HINT }] };
            default:
                throw new Error('Unknown action: ' + action.type);
        }
    }

    function dispatch(action) {
        const result = reduce(state, action);
        state = result.state;
        render();
        result.effects.forEach(runEffect);
    }

    function runEffect(effect) {
        if (effect.type === 'copy') copyToClipboard(effect.text);
        else if (effect.type === 'mark') markForManualCopy(effect.index);
        else if (effect.type === 'notify') showNotification(effect.message);
        else if (effect.type === 'save_settings') saveSettings(effect.settings);
    }

    // Rendering
    function render() {
        const count = state.filtered.length;
        resultCount.textContent = `${count} snippet${count !== 1 ? 's' : ''} found`;
        autoCopyToggle.checked = state.autoCopy;
        snippetList.innerHTML = '';

        if (count === 0) {
            emptyState.classList.add('visible');
            snippetList.style.display = 'none';
            return;
        }
        emptyState.classList.remove('visible');
        snippetList.style.display = 'flex';

        state.filtered.forEach((snippet, index) => {
            const card = document.createElement('div');
            card.className = 'snippet-card' + (index === state.selectedIndex ? ' selected' : '');

            const header = document.createElement('div');
            header.className = 'snippet-header';
            const command = document.createElement('div');
            command.className = 'snippet-command';
            command.textContent = snippet.command;
            const actions = document.createElement('div');
            actions.className = 'snippet-actions';
            const del = document.createElement('button');
            del.className = 'btn btn-sm btn-danger';
            del.textContent = 'Delete';
            del.addEventListener('click', e => { e.stopPropagation(); deleteSnippet(snippet.id); });
            actions.appendChild(del);
            header.appendChild(command);
            header.appendChild(actions);
            card.appendChild(header);

            if (snippet.description) {
                const desc = document.createElement('div');
                desc.className = 'snippet-description';
                desc.textContent = snippet.description;
                card.appendChild(desc);
            }

            const keywords = document.createElement('div');
            keywords.className = 'snippet-keywords';
            (snippet.keywords || []).forEach(k => {
                const tag = document.createElement('span');
                tag.className = 'keyword-tag';
                tag.textContent = k;
                keywords.appendChild(tag);
            });
            card.appendChild(keywords);

            card.addEventListener('click', () => dispatch({ type: 'pick', index: index }));
            snippetList.appendChild(card);
        });

        const selected = snippetList.children[state.selectedIndex];
        if (selected) selected.scrollIntoView({ block: 'nearest', behavior: 'smooth' });
    }

    // Effects
    async function copyToClipboard(text) {
        try {
            await navigator.clipboard.writeText(text);
            showNotification('Copied to clipboard!');
        } catch (err) {
            console.error('Error copying to clipboard:', err);
            showNotification('Failed to copy to clipboard', 'error');
        }
    }

    function markForManualCopy(index) {
        const card = snippetList.children[index];
        if (!card) return;
        const range = document.createRange();
        range.selectNodeContents(card.querySelector('.snippet-command'));
        const selection = window.getSelection();
        selection.removeAllRanges();
        selection.addRange(range);
    }

    function showNotification(message, type = 'success') {
        notification.textContent = message;
        notification.className = `notification ${type} visible`;
        clearTimeout(notificationTimer);
        notificationTimer = setTimeout(() => notification.classList.remove('visible'), 3000);
    }

    async function errorMessage(response, fallback) {
        try {
            const body = await response.json();
            return body.error || fallback;
        } catch (err) {
            return fallback;
        }
    }

    // API calls
    async function loadSnippets() {
        try {
            const response = await fetch('/api/snippets');
            if (!response.ok) throw new Error(response.statusText);
            const snippets = await response.json();
            dispatch({ type: 'load', snippets: snippets });
        } catch (err) {
            console.error('Error loading snippets:', err);
            showNotification('Error loading snippets', 'error');
        }
    }

    async function saveSettings(settings) {
        try {
            const response = await fetch('/api/settings', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(settings)
            });
            if (!response.ok) showNotification(await errorMessage(response, 'Failed to save settings'), 'error');
        } catch (err) {
            console.error('Error saving settings:', err);
            showNotification('Error saving settings', 'error');
        }
    }

    async function addSnippet(command, keywords, description) {
        try {
            const response = await fetch('/api/snippets', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ command: command, keywords: keywords, description: description })
            });
            if (response.ok) {
                showNotification('Snippet added successfully');
                closeModal('add-modal');
                await loadSnippets();
            } else {
                showNotification(await errorMessage(response, 'Failed to add snippet'), 'error');
            }
        } catch (err) {
            console.error('Error adding snippet:', err);
            showNotification('Error adding snippet', 'error');
        }
    }

    async function deleteSnippet(id) {
        if (!confirm('Are you sure you want to delete this snippet?')) return;
        try {
            const response = await fetch('/api/snippets/' + encodeURIComponent(id), { method: 'DELETE' });
            if (response.ok) {
                showNotification('Snippet deleted successfully');
                await loadSnippets();
            } else {
                showNotification(await errorMessage(response, 'Failed to delete snippet'), 'error');
            }
        } catch (err) {
            console.error('Error deleting snippet:', err);
            showNotification('Error deleting snippet', 'error');
        }
    }

    async function importSnippets(form) {
        try {
            const response = await fetch('/api/snippets/import', { method: 'POST', body: new FormData(form) });
            if (response.ok) {
                const data = await response.json();
                showNotification(`Imported ${data.imported} snippet(s)` + (data.skipped ? `, skipped ${data.skipped}` : ''));
                closeModal('import-modal');
                await loadSnippets();
            } else {
                showNotification(await errorMessage(response, 'Failed to import snippets'), 'error');
            }
        } catch (err) {
            console.error('Error importing snippets:', err);
            showNotification('Error importing snippets', 'error');
        }
    }

    // Modals
    window.openModal = function(id) {
        document.getElementById(id).classList.add('active');
        menuDropdown.classList.remove('active');
        const first = document.querySelector('#' + id + ' textarea, #' + id + ' input');
        if (first) first.focus();
    };

    window.closeModal = function(id) {
        const modal = document.getElementById(id);
        modal.classList.remove('active');
        const form = modal.querySelector('form');
        if (form) form.reset();
        searchInput.focus();
    };

    document.querySelectorAll('.modal-overlay').forEach(overlay => {
        overlay.addEventListener('click', function(e) {
            if (e.target === this) closeModal(this.id);
        });
    });

    document.addEventListener('keydown', e => {
        if (e.key !== 'Escape') return;
        document.querySelectorAll('.modal-overlay.active').forEach(overlay => closeModal(overlay.id));
    });

    menuBtn.addEventListener('click', e => {
        e.stopPropagation();
        menuDropdown.classList.toggle('active');
    });
    document.addEventListener('click', () => menuDropdown.classList.remove('active'));

    // Wiring
    searchInput.addEventListener('input', () => dispatch({ type: 'search', query: searchInput.value }));

    searchInput.addEventListener('keydown', e => {
        if (state.filtered.length === 0) return;
        if (e.key === 'ArrowDown') {
            e.preventDefault();
            dispatch({ type: 'down' });
        } else if (e.key === 'ArrowUp') {
            e.preventDefault();
            dispatch({ type: 'up' });
        } else if (e.key === 'Enter') {
            e.preventDefault();
            dispatch({ type: 'confirm' });
        }
    });

    autoCopyToggle.addEventListener('change', () => dispatch({ type: 'toggle_auto_copy', enabled: autoCopyToggle.checked }));

    document.getElementById('add-btn').addEventListener('click', () => openModal('add-modal'));

    document.getElementById('snippet-form').addEventListener('submit', e => {
        e.preventDefault();
        const command = document.getElementById('command-input').value.trim();
        const keywords = document.getElementById('keywords-input').value.split(',').map(k => k.trim()).filter(k => k);
        const description = document.getElementById('description-input').value.trim();
        if (command && keywords.length > 0) {
            addSnippet(command, keywords, description);
        } else {
            showNotification('Command and keywords are required', 'error');
        }
    });

    document.getElementById('import-form').addEventListener('submit', e => {
        e.preventDefault();
        importSnippets(e.target);
    });

    render();
    searchInput.focus();
})();
</script>
</body>
</html>'''


# ─── Routes ────────────────────────────────────────────────────────────────

def error_response(e):
    return jsonify({"error": str(e)}), e.status

@app.route("/api/snippets", methods=["GET"])
def list_snippets_route():
    snippets = list_all(snippet_store())
    query = request.args.get("q")
    if query is not None:
        snippets = filter_snippets(snippets, query)
    return jsonify(snippets)

@app.route("/api/snippets", methods=["POST"])
def create_snippet_route():
    data = request.get_json(silent=True)
    try:
        if not isinstance(data, dict):
            raise ValidationError("Command and keywords are required")
        snippet = create_snippet(snippet_store(), data.get("command"), data.get("keywords"), data.get("description"))
    except SnipDeckError as e:
        return error_response(e)
    return jsonify(snippet), 201

@app.route("/api/snippets/<snippet_id>", methods=["DELETE"])
def delete_snippet_route(snippet_id):
    try:
        delete_snippet(snippet_store(), snippet_id)
    except SnipDeckError as e:
        return error_response(e)
    return jsonify({"message": "Snippet deleted successfully"})

@app.route("/api/snippets/export", methods=["GET"])
def export_route():
    filename = secure_filename(request.args.get("filename", "")) or "snippets.yml"
    if not filename.endswith((".yml", ".yaml")):
        filename += ".yml"
    data = dump_snippet_pack(list_all(snippet_store()))
    return send_file(io.BytesIO(data.encode("utf-8")), mimetype="application/x-yaml",
                     as_attachment=True, download_name=filename)

@app.route("/api/snippets/import", methods=["POST"])
def import_route():
    try:
        file = request.files.get("file")
        if file is None or file.filename == "":
            raise ValidationError("No file selected")
        try:
            text = file.read().decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError("File is not UTF-8 text")
        imported, skipped = import_snippets(snippet_store(), read_snippet_pack(text))
    except SnipDeckError as e:
        app.logger.warning("Import rejected: %s", e)
        return error_response(e)
    return jsonify({"imported": imported, "skipped": skipped}), 201

@app.route("/api/settings", methods=["GET"])
def get_settings_route():
    return jsonify(get_settings(settings_store()))

@app.route("/api/settings", methods=["POST"])
def replace_settings_route():
    try:
        settings = replace_settings(settings_store(), request.get_json(silent=True))
    except SnipDeckError as e:
        return error_response(e)
    return jsonify(settings)

@app.route("/api/<path:rest>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def api_not_found(rest):
    return jsonify({"error": "Not found"}), 404

@app.route("/", defaults={"path": ""})
@app.route("/<path:path>")
def index(path):
    state = initial_state(list_all(snippet_store()), get_settings(settings_store()))
    return render_template_string(TEMPLATE, state=state_payload(state), hint=MANUAL_COPY_HINT)

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    host, port = app.config["HOST"], int(app.config["PORT"])
    url = f"http://localhost:{port}"
    app.logger.info("SnipDeck running on http://%s:%s (data in %s)", host, port, app.config["DATA_DIR"])
    if app.config["OPEN_BROWSER"]:
        Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(debug=False, port=port, host=host)

if __name__ == "__main__":
    main()
