from __future__ import annotations

import html
import json
from functools import lru_cache
from importlib import resources

SECTION_LABELS = {
    "title": "Curated species notes",
    "facts": "Key facts",
    "lab_rules": "Lab rules",
}

FALLBACK_NOTES = "No curated notes yet. Add one in src/motutor/pedagogy/molecules.json."


@lru_cache(maxsize=1)
def load_molecule_notes() -> dict[str, dict]:
    data = resources.files(__name__).joinpath("molecules.json").read_text(encoding="utf-8")
    return json.loads(data)


@lru_cache(maxsize=1)
def load_lab_rules() -> list[dict]:
    data = resources.files(__name__).joinpath("lab_rules.json").read_text(encoding="utf-8")
    return json.loads(data)


def molecule_entry(molecule_id: str) -> dict | None:
    return load_molecule_notes().get(str(molecule_id or "").strip())


def _escape(text: str) -> str:
    return html.escape(str(text or ""))


def _format_list(items: list[str]) -> str:
    lines = "".join(f"<li>{_escape(item)}</li>" for item in items if str(item).strip())
    return f"<ul>{lines}</ul>" if lines else ""


def molecule_notes_html(molecule_id: str, include_title: bool = True) -> str:
    entry = molecule_entry(molecule_id)
    if not entry:
        return f"<div style=\"line-height:1.4;\"><p><i>{_escape(FALLBACK_NOTES)}</i></p></div>"
    title = _escape(entry.get("title") or SECTION_LABELS["title"])
    summary = _escape(entry.get("summary") or "")
    facts = entry.get("facts") or []
    parts = [f"<p><b>{title}</b></p>"] if include_title else []
    if summary:
        parts.append(f"<p>{summary}</p>")
    if facts:
        parts.append(f"<p><b>{SECTION_LABELS['facts']}</b></p>")
        parts.append(_format_list(list(facts)))
    return f"<div style=\"line-height:1.4;\">{''.join(parts)}</div>"


def lab_rules_html() -> str:
    items = "".join(
        f"<li><b>{_escape(rule.get('name'))}:</b> {_escape(rule.get('text'))}</li>" for rule in load_lab_rules()
    )
    return f"<p><b>{SECTION_LABELS['lab_rules']}</b></p><ul>{items}</ul>"
