"""
Validation utilities for the Assembly Slot Scheduler
"""
import re
from typing import Dict, Any, List


class SubmissionValidator:
    """Validator for incoming booking submissions"""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format"""
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(email_pattern, email))

    @staticmethod
    def validate_submission(submission: Dict[str, Any]) -> List[str]:
        """Validate normalized submission fields and return list of errors"""
        errors = []

        email = submission.get("email")
        if not email:
            errors.append("Missing required field: email")
        elif not SubmissionValidator.validate_email(email):
            errors.append(f"Invalid email format: {email}")

        time_requested = submission.get("time_requested")
        if time_requested is not None:
            if not isinstance(time_requested, int) or time_requested <= 0:
                errors.append(f"Time requested must be a positive number of minutes: {time_requested}")

        return errors


class DataSanitizer:
    """Sanitize and clean input data"""

    @staticmethod
    def sanitize_email(email: str) -> str:
        """Sanitize email address"""
        return email.strip().lower()

    @staticmethod
    def sanitize_text(text: str) -> str:
        """Sanitize text content"""
        # Remove excessive whitespace
        text = re.sub(r'\s+', ' ', text.strip())
        # Remove characters that would break the HTML email bodies
        text = re.sub(r'[<>"]', '', text)
        return text

    @staticmethod
    def sanitize_submission(submission: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize a normalized submission"""
        sanitized = submission.copy()

        if sanitized.get("email"):
            sanitized["email"] = DataSanitizer.sanitize_email(sanitized["email"])

        text_fields = ["name", "class_name", "phone", "subject"]
        for field in text_fields:
            if sanitized.get(field):
                sanitized[field] = DataSanitizer.sanitize_text(sanitized[field])

        if sanitized.get("slides_link"):
            sanitized["slides_link"] = sanitized["slides_link"].strip()

        return sanitized
