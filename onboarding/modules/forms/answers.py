"""
Submission rules for public forms.

Questions and forms here are the raw table rows (dicts); questions carry an
``options`` list. Validators return an error message, or None when the
input is acceptable.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from onboarding.core.clock import parse_timestamp
from onboarding.core.validation import is_valid_email
from onboarding.modules.forms.schemas import CHOICE_TYPES


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value))
        return True
    except ValueError:
        return False


def _is_url(value: Any) -> bool:
    text = str(value).strip()
    return text.startswith(("http://", "https://")) and len(text) > len("https://")


def _selected(value: Any) -> List[str]:
    """Choice answers arrive as one value or a list of values"""
    if _is_blank(value):
        return []
    values = value if isinstance(value, (list, tuple)) else [value]
    return [str(v) for v in values]


def form_closed_reason(form: Dict[str, Any], submission_count: int, now: datetime) -> Optional[str]:
    """Why the form cannot take a submission right now, if anything"""
    if form.get("status") != "active":
        return "This form is not accepting responses"
    start_at = parse_timestamp(form.get("start_at"))
    if start_at and now < start_at:
        return "This form is not open yet"
    end_at = parse_timestamp(form.get("end_at"))
    if end_at and now > end_at:
        return "This form is closed"
    limit = form.get("submission_limit")
    if limit and submission_count >= limit:
        return "This form has reached its submission limit"
    return None


def validate_answers(questions: List[Dict[str, Any]], answers: Dict[str, Any]) -> Optional[str]:
    for question in questions:
        label = question["label"]
        value = answers.get(question["id"])
        if _is_blank(value):
            if question.get("required"):
                return f"Please answer: {label}"
            continue

        qtype = question["type"]
        if qtype == "email" and not is_valid_email(str(value).strip()):
            return f"Invalid email for: {label}"
        if qtype == "url" and not _is_url(value):
            return f"Invalid URL for: {label}"
        if qtype == "number" and not _is_number(value):
            return f"Invalid number for: {label}"
        if qtype in CHOICE_TYPES:
            selected = _selected(value)
            if qtype != "checkboxes" and len(selected) > 1:
                return f"Select one option for: {label}"
            options = question.get("options") or []
            allowed = {o["value"] for o in options}
            accepts_other = any(o.get("is_other") for o in options)
            if not accepts_other and any(s not in allowed for s in selected):
                return f"Invalid option for: {label}"
    return None


def build_answer_row(question: Dict[str, Any], value: Any) -> Dict[str, Any]:
    """Map a raw answer onto the form_answers column for its question type"""
    qid = question["id"]
    qtype = question["type"]
    if qtype in CHOICE_TYPES:
        return {"question_id": qid, "selected_options": _selected(value)}
    if qtype == "number":
        return {"question_id": qid, "value_number": float(value) if not _is_blank(value) else None}
    if qtype == "date":
        return {"question_id": qid, "value_date": value or None}
    if qtype == "time":
        return {"question_id": qid, "value_time": value or None}
    if qtype == "email":
        return {"question_id": qid, "value_email": str(value).strip() if value else None}
    if qtype == "url":
        return {"question_id": qid, "value_url": str(value).strip() if value else None}
    if qtype == "file_upload":
        return {"question_id": qid, "files": value or None}
    return {"question_id": qid, "value_text": value or ""}
