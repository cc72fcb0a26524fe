"""
Normalization of form submissions into Requester payloads
"""
import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from slot_scheduler.scheduler.errors import ValidationError
from slot_scheduler.scheduler.models import Requester
from utils.validators import DataSanitizer, SubmissionValidator

logger = logging.getLogger(__name__)


def _first_value(value) -> Optional[str]:
    """Google Form namedValues wrap every answer in a list"""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_time_requested(value, default: int) -> int:
    """Take the first whole number in the answer, e.g. '10 minutes' -> 10"""
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = re.search(r'\d+', str(value))
    return int(match.group(0)) if match else default


def parse_form_timestamp(value: Optional[str], formats, fallback: datetime) -> datetime:
    if not value:
        return fallback
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Unrecognized form timestamp {value!r}, using current time")
        return fallback


def normalize_submission(payload: Dict[str, Any], config) -> Dict[str, Any]:
    """
    Map a form payload onto requester fields.

    Accepts ``{"namedValues": {...}}`` as delivered by a Google Form trigger,
    a bare namedValues mapping keyed by question titles, or a flat object
    keyed by field names.
    """
    answers = payload.get("namedValues", payload)
    normalized = {}
    for field, question in config.FORM_KEYS.items():
        value = answers.get(question)
        if value is None:
            value = answers.get(field)
        normalized[field] = _first_value(value)
    return normalized


def build_requester(payload: Dict[str, Any], config,
                    clock: Callable[[], datetime] = datetime.now) -> Requester:
    """Validate a submission and build its Requester, raising ValidationError"""
    normalized = normalize_submission(payload, config)
    normalized["time_requested"] = parse_time_requested(normalized.get("time_requested"), config.SLOT_DURATION)

    errors = SubmissionValidator.validate_submission(normalized)
    if errors:
        raise ValidationError(errors)

    clean = DataSanitizer.sanitize_submission(normalized)
    return Requester(
        email=clean["email"],
        name=clean.get("name") or "",
        class_name=clean.get("class_name") or "",
        phone=clean.get("phone") or "",
        subject=clean.get("subject") or "",
        slides_link=clean.get("slides_link") or "",
        time_requested=clean["time_requested"],
        submitted_at=parse_form_timestamp(clean.get("timestamp"), config.FORM_TIMESTAMP_FORMATS, clock()),
    )
