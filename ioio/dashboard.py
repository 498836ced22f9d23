"""Submissions dashboard.

Reads both record kinds from the Submission API, computes the summary
statistics and renders them as tables. Each kind is fetched independently
so one failing list only blanks its own section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import requests
from flask import (Blueprint, abort, current_app, flash, redirect, render_template,
                   request, url_for)

from ioio.kinds import KINDS, PROPERTY, SERVICE, RecordKind

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
RECENT_WINDOW = timedelta(hours=24)

COLUMNS: Dict[str, List[str]] = {
    PROPERTY.name: ["id", "name", "email", "property_type", "created_at"],
    SERVICE.name: ["id", "name", "email", "service_type", "created_at"],
}


@dataclass
class Section:
    kind: RecordKind
    records: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class Stats:
    total_properties: int
    total_services: int
    recent_activity: int


# ----------------- API CLIENT ------------------------

class SubmissionClient:
    """Read/delete client for the Submission API."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _url(self, kind: RecordKind, record_id: Optional[int] = None) -> str:
        url = f"{self.base_url}/api/{kind.endpoint}"
        if record_id is not None:
            url = f"{url}/{record_id}"
        return url

    def fetch(self, kind: RecordKind) -> Section:
        try:
            response = self.session.get(self._url(kind))
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching %s: %s", kind.endpoint, e)
            return Section(kind, error=f"Failed to fetch {kind.endpoint}")

        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            logger.error("Error fetching %s: %s", kind.endpoint, message)
            return Section(kind, error=message or f"Failed to fetch {kind.endpoint}")
        return Section(kind, records=body.get("data") or [])

    def delete(self, kind: RecordKind, record_id: int) -> Tuple[bool, str]:
        try:
            response = self.session.delete(self._url(kind, record_id))
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Delete failed for %s %s: %s", kind.name, record_id, e)
            return False, f"Delete failed: {e}"

        message = body.get("message") if isinstance(body, dict) else None
        ok = response.ok and isinstance(body, dict) and bool(body.get("success"))
        return ok, message or ("Deleted" if ok else "Delete failed")


# ----------------- PRESENTATION HELPERS ------------------------

def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Any) -> str:
    """Local date and time to the minute, or N/A."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return NOT_AVAILABLE
    local = parsed.astimezone()
    return f"{local:%x} {local:%H:%M}"


def display_value(value: Any) -> Any:
    if value is None or value == "":
        return NOT_AVAILABLE
    return value


def humanize(key: str) -> str:
    return key.replace("_", " ").title()


def compute_stats(properties: List[Dict[str, Any]], services: List[Dict[str, Any]],
                  now: Optional[datetime] = None) -> Stats:
    cutoff = (now or datetime.now(timezone.utc)) - RECENT_WINDOW

    def is_recent(record):
        created = parse_timestamp(record.get("created_at"))
        return created is not None and created > cutoff

    recent = sum(1 for r in properties if is_recent(r)) + sum(1 for r in services if is_recent(r))
    return Stats(
        total_properties=len(properties),
        total_services=len(services),
        recent_activity=recent,
    )


def filter_records(records: List[Dict[str, Any]], term: Optional[str]) -> List[Dict[str, Any]]:
    if not term:
        return records
    needle = term.lower()
    return [
        record for record in records
        if any(value not in (None, "") and needle in str(value).lower()
               for value in record.values())
    ]


# ----------------- ROUTES ------------------------

dashboard = Blueprint("dashboard", __name__, url_prefix="/dashboard",
                      template_folder="templates")


def _client() -> SubmissionClient:
    return current_app.extensions["submission_client"]


def _kind_or_404(kind_name: str) -> RecordKind:
    kind = KINDS.get(kind_name)
    if kind is None:
        abort(404)
    return kind


@dashboard.app_template_filter("timestamp")
def _timestamp_filter(value):
    return format_timestamp(value)


@dashboard.route("/", methods=["GET"])
def index():
    search = request.args.get("q", "").strip()
    client = _client()
    properties = client.fetch(PROPERTY)
    services = client.fetch(SERVICE)

    stats = compute_stats(properties.records, services.records)
    for section in (properties, services):
        section.records = filter_records(section.records, search)

    return render_template(
        "dashboard.html",
        sections=[properties, services],
        columns=COLUMNS,
        stats=stats,
        search=search,
        display_value=display_value,
        humanize=humanize,
    )


@dashboard.route("/<kind_name>/<int:record_id>", methods=["GET"])
def detail(kind_name, record_id):
    kind = _kind_or_404(kind_name)
    section = _client().fetch(kind)
    if section.error:
        flash(f"Error loading data: {section.error}", "error")
        return redirect(url_for(".index"))

    record = next((r for r in section.records if str(r.get("id")) == str(record_id)), None)
    if record is None:
        abort(404)

    fields = [
        (humanize(key), format_timestamp(value) if "date" in key or "created" in key
         else display_value(value))
        for key, value in record.items() if key != "id"
    ]
    return render_template("record.html", kind=kind, record_id=record_id, fields=fields)


@dashboard.route("/<kind_name>/<int:record_id>/delete", methods=["POST"])
def delete(kind_name, record_id):
    kind = _kind_or_404(kind_name)
    ok, message = _client().delete(kind, record_id)
    flash(message, "success" if ok else "error")
    return redirect(url_for(".index", q=request.form.get("q") or None))


def register_dashboard(app, client: SubmissionClient) -> None:
    app.extensions["submission_client"] = client
    app.register_blueprint(dashboard)
