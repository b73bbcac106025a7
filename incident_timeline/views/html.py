"""Server-rendered HTML pages."""

from html import escape
from typing import Dict, List, Optional

from incident_timeline.schemas.event import SelectableEvent
from incident_timeline.schemas.moderation import ModerationQueue
from incident_timeline.schemas.timeline import TimelineEvent, TimelineEvidence

SIDE_HEADINGS = {
    "pro": "支持 / 正面觀點",
    "against": "反對 / 負面觀點",
    "neutral": "相關資料 / 中立報導",
}
EMPTY_SIDE = "暫無相關資料"
OPEN_SOURCE = "點擊查看來源"
DATA_SOURCES = "資料來源：公開會議紀錄、社交媒體、新聞報導"
FOOTER_LINES = ["由一群關心大埔的居民自發製作。", "資料僅供參考，如有錯漏請指正。"]

EVIDENCE_TYPES = [("link", "Link"), ("youtube", "YouTube"), ("iframe", "Iframe"), ("blob", "Uploaded file")]
EVIDENCE_SIDES = [("neutral", "Neutral"), ("pro", "Pro"), ("against", "Against")]


def _e(value) -> str:
    return escape("" if value is None else str(value), quote=True)


def _format_date(value) -> str:
    return value.strftime("%Y年%m月%d日 %H:%M") if value else ""


def _options(choices, selected: Optional[str]) -> str:
    return "".join(
        f'<option value="{_e(value)}"{" selected" if value == selected else ""}>{_e(label)}</option>'
        for value, label in choices
    )


def layout(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>"
        '<html lang="zh-HK"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{_e(title)}</title></head>"
        f"<body>{body}</body></html>"
    )


def notice(message: Optional[str], kind: str = "error") -> str:
    if not message:
        return ""
    return f'<div class="notice notice-{kind}" role="alert">{_e(message)}</div>'


# Public timeline


def render_evidence(item: TimelineEvidence) -> str:
    content = item.content
    if content.kind == "embed":
        # Raw markup from a verified row; moderation is the only sanitization
        inner = f'<div class="embed">{content.markup}</div>'
    elif content.kind == "video":
        inner = (
            f'<iframe src="{_e(content.embed_url)}" title="{_e(item.title)}" '
            'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture" '
            "allowfullscreen></iframe>"
        )
    else:
        inner = (
            f'<a href="{_e(content.url)}" target="_blank" rel="noopener noreferrer">'
            f'<span class="url">{_e(content.display)}</span> <small>{OPEN_SOURCE}</small></a>'
        )
    return f'<div class="evidence"><h4>{_e(item.title)}</h4>{inner}</div>'


def _side_column(side: str, items: List[TimelineEvidence]) -> str:
    if items:
        cards = "".join(render_evidence(item) for item in items)
    else:
        cards = f'<p class="empty">{EMPTY_SIDE}</p>'
    return f'<div class="side side-{side}"><h5>{SIDE_HEADINGS[side]}</h5>{cards}</div>'


def render_event(event: TimelineEvent) -> str:
    parts = [
        f'<article class="event" id="event-{_e(event.id)}">',
        f"<h3>{_e(event.title)}</h3>",
        f'<time datetime="{_e(event.date.isoformat())}">{_e(_format_date(event.date))}</time>',
    ]
    if event.description:
        parts.append(f"<p>{_e(event.description)}</p>")
    if event.pro or event.against:
        parts.append(_side_column("pro", event.pro))
        parts.append(_side_column("against", event.against))
    if event.neutral:
        parts.append(
            f'<div class="side side-neutral"><h5>{SIDE_HEADINGS["neutral"]}</h5>'
            + "".join(render_evidence(item) for item in event.neutral)
            + "</div>"
        )
    parts.append("</article>")
    return "".join(parts)


def render_timeline_page(site_title: str, timeline: List[TimelineEvent]) -> str:
    body = (
        f"<header><h1>{_e(site_title)}</h1>"
        f'<p class="sources">{DATA_SOURCES}</p>'
        '<a href="/submit">提交新資料</a></header>'
        f'<main class="timeline">{"".join(render_event(event) for event in timeline)}</main>'
        f'<footer>{"".join(f"<p>{line}</p>" for line in FOOTER_LINES)}</footer>'
    )
    return layout(site_title, body)


# Submission form


def render_submit_page(
    site_title: str,
    events: List[SelectableEvent],
    error: Optional[str] = None,
    success: Optional[str] = None,
    values: Optional[Dict[str, Optional[str]]] = None,
) -> str:
    """Submission form, refilled with ``values`` after a failed attempt."""
    values = values or {}

    def value(name: str) -> str:
        return _e(values.get(name))

    event_choices = [("new", "Create new event")] + [(str(e.id), e.title) for e in events]
    body = (
        "<h1>Submit evidence</h1>"
        f"{notice(error)}{notice(success, 'success')}"
        '<form method="post" action="/submit" enctype="multipart/form-data">'
        f'<label>Event <select name="event_id">{_options(event_choices, values.get("event_id") or "new")}</select></label>'
        "<fieldset><legend>New event</legend>"
        f'<label>Title <input name="event_title" value="{value("event_title")}"></label>'
        f'<label>Date <input type="datetime-local" name="event_date" value="{value("event_date")}"></label>'
        f'<label>Description <textarea name="event_description">{value("event_description")}</textarea></label>'
        "</fieldset>"
        "<fieldset><legend>Evidence</legend>"
        f'<label>Title <input name="evidence_title" value="{value("evidence_title")}" required></label>'
        f'<label>Type <select name="evidence_type">{_options(EVIDENCE_TYPES, values.get("evidence_type") or "link")}</select></label>'
        f'<label>Side <select name="evidence_side">{_options(EVIDENCE_SIDES, values.get("evidence_side") or "neutral")}</select></label>'
        f'<label>Content (URL or embed code) <textarea name="evidence_content">{value("evidence_content")}</textarea></label>'
        '<label>File <input type="file" name="file"></label>'
        "</fieldset>"
        '<button type="submit">Submit</button>'
        "</form>"
        '<a href="/">Back to timeline</a>'
    )
    return layout(f"Submit - {site_title}", body)


# Moderation console


def render_login_page(error: Optional[str] = None) -> str:
    body = (
        "<h1>Admin Login</h1>"
        f"{notice(error)}"
        '<form method="post" action="/admin/login">'
        '<label>Email <input type="email" name="email" required></label>'
        '<label>Password <input type="password" name="password" required></label>'
        '<button type="submit">Login</button>'
        "</form>"
    )
    return layout("Admin Login", body)


def _decision_buttons(kind: str, row_id) -> str:
    action = f"/admin/{kind}/{_e(row_id)}/status"
    return (
        f'<form method="post" action="{action}" class="decision">'
        '<button name="status" value="verified">Approve</button>'
        '<button name="status" value="rejected">Reject</button>'
        "</form>"
    )


def render_event_card(event) -> str:
    date_value = event.date.strftime("%Y-%m-%dT%H:%M") if event.date else ""
    return (
        '<div class="card">'
        f"<h3>{_e(event.title)}</h3>"
        f"<p>{_e(_format_date(event.date))}</p>"
        f"<p>{_e(event.description)}</p>"
        f'<details><summary>Edit</summary><form method="post" action="/admin/event/{_e(event.id)}/edit">'
        f'<label>Title <input name="title" value="{_e(event.title)}"></label>'
        f'<label>Date <input type="datetime-local" name="date" value="{_e(date_value)}"></label>'
        f'<label>Description <textarea name="description">{_e(event.description)}</textarea></label>'
        '<button type="submit">Save</button></form></details>'
        f"{_decision_buttons('event', event.id)}"
        "</div>"
    )


def render_evidence_card(item) -> str:
    return (
        '<div class="card">'
        f"<h3>{_e(item.title)}</h3>"
        f'<p class="event-title">{_e(item.event_title)}</p>'
        f'<p><span class="tag">{_e(item.type)}</span> <span class="tag side-{_e(item.side)}">{_e(item.side)}</span></p>'
        f'<pre class="content-url">{_e(item.content_url)}</pre>'
        f'<details><summary>Edit</summary><form method="post" action="/admin/evidence/{_e(item.id)}/edit">'
        f'<label>Title <input name="title" value="{_e(item.title)}"></label>'
        f'<label>Type <select name="type">{_options(EVIDENCE_TYPES, item.type)}</select></label>'
        f'<label>Side <select name="side">{_options(EVIDENCE_SIDES, item.side)}</select></label>'
        f'<label>Content URL <textarea name="content_url">{_e(item.content_url)}</textarea></label>'
        '<button type="submit">Save</button></form></details>'
        f"{_decision_buttons('evidence', item.id)}"
        "</div>"
    )


def _section(title: str, cards: List[str], empty: str) -> str:
    inner = "".join(cards) if cards else f'<div class="empty">{_e(empty)}</div>'
    return f"<section><h2>{_e(title)} ({len(cards)})</h2>{inner}</section>"


def render_console_page(
    queue: ModerationQueue,
    email: str,
    tab: str = "pending",
    error: Optional[str] = None,
) -> str:
    pending_count = len(queue.pending_events) + len(queue.pending_evidence)
    nav = (
        f'<nav><a href="/admin?tab=pending">Pending Approvals ({pending_count})</a> '
        '<a href="/admin?tab=verified">Verified Content</a></nav>'
    )

    if tab == "verified":
        sections = _section(
            "Verified Events", [render_event_card(e) for e in queue.verified_events], "No verified events"
        ) + _section(
            "Verified Evidence", [render_evidence_card(e) for e in queue.verified_evidence], "No verified evidence"
        )
    else:
        sections = _section(
            "Pending Events", [render_event_card(e) for e in queue.pending_events], "No pending events"
        ) + _section(
            "Pending Evidence", [render_evidence_card(e) for e in queue.pending_evidence], "No pending evidence"
        )

    body = (
        "<header><h1>Admin Console</h1>"
        f"<span>{_e(email)}</span>"
        '<form method="post" action="/admin/logout"><button type="submit">Logout</button></form>'
        "</header>"
        f"{notice(error)}{nav}{sections}"
    )
    return layout("Admin Console", body)
