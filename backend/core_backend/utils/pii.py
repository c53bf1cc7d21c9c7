"""
Keeping customer contact details out of logs.

Customer names, emails and phone numbers arrive with every public order and
group-order participant. Code that logs about customers uses
``get_pii_safe_logger`` and passes contact details through ``extra`` (which
is scrubbed) or masks them with ``PIIProtection`` before formatting.
"""
import logging
import re
from typing import Any, Dict, Optional


class PIIProtection:

    PII_FIELDS = {
        'email', 'phone', 'name', 'customer_name', 'participant_name',
    }

    @staticmethod
    def mask_email(email: Optional[str]) -> str:
        """
        Example: jane.doe@example.com -> ja******@example.com
        """
        if not email or '@' not in email:
            return email or ''
        local, domain = email.split('@', 1)
        if len(local) <= 2:
            return f"{local[:1]}*@{domain}"
        return f"{local[:2]}{'*' * (len(local) - 2)}@{domain}"

    @staticmethod
    def mask_phone(phone: Optional[str]) -> str:
        """
        Keep the last four digits.
        Example: +62 812-3456-7890 -> +** ***-****-7890
        """
        if not phone:
            return phone or ''
        digits_seen = 0
        total_digits = len(re.sub(r'\D', '', phone))
        masked = []
        for char in phone:
            if char.isdigit():
                digits_seen += 1
                masked.append(char if digits_seen > total_digits - 4 else '*')
            else:
                masked.append(char)
        return ''.join(masked)

    @staticmethod
    def scrub_pii_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(data, dict):
            return data

        scrubbed = {}
        for key, value in data.items():
            if key.lower() in PIIProtection.PII_FIELDS:
                scrubbed[key] = '[REDACTED]'
            elif isinstance(value, dict):
                scrubbed[key] = PIIProtection.scrub_pii_from_dict(value)
            else:
                scrubbed[key] = value
        return scrubbed


class PIISafeLogger:
    """Logger wrapper that scrubs PII from ``extra`` before emitting."""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _safe_log(self, level: int, message: str, *args, **kwargs):
        extra = kwargs.get('extra')
        if extra:
            kwargs['extra'] = PIIProtection.scrub_pii_from_dict(extra)
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._safe_log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._safe_log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._safe_log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._safe_log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._safe_log(logging.ERROR, message, *args, **kwargs)


def get_pii_safe_logger(name: str) -> PIISafeLogger:
    """
    Usage:
        logger = get_pii_safe_logger(__name__)
        logger.info("Customer created", extra={"email": customer.email})  # email redacted
    """
    return PIISafeLogger(name)
