"""
Redaction of credentials before they reach the logs

Registration bodies carry passwords; payment responses carry the processor's
client secret. Anything keyed by a name in SENSITIVE_FIELDS is replaced,
at any nesting depth, before the payload is formatted into a log line.
"""

from typing import Any, Dict, Mapping, Optional

REDACTED = '[REDACTED]'

SENSITIVE_FIELDS = frozenset({
    # account credentials
    'password',
    'confirm_password',
    'current_password',
    'new_password',
    # session and API tokens
    'token',
    'access_token',
    'refresh_token',
    'csrf_token',
    'session_id',
    'secret',
    'api_key',
    # payment processor
    'client_secret',
    'card_number',
    'cvc',
    'cvv',
})


def is_sensitive(key) -> bool:
    return str(key).lower() in SENSITIVE_FIELDS


def _redact(value: Any, redact_text: str) -> Any:
    if isinstance(value, Mapping):
        return {
            key: redact_text if is_sensitive(key) else _redact(item, redact_text)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item, redact_text) for item in value]
    return value


def sanitize_dict(data: Dict[str, Any], redact_text: str = REDACTED) -> Dict[str, Any]:
    """
    Copy of `data` with sensitive values replaced; the input is not modified.

    >>> sanitize_dict({'email': 'hr@acme.test', 'password': 'secret123'})
    {'email': 'hr@acme.test', 'password': '[REDACTED]'}
    """
    if not data:
        return data
    return _redact(data, redact_text)


def sanitize_payload(payload: Optional[Mapping], redact_text: str = REDACTED) -> Dict[str, Any]:
    """Accepts a JSON body, a form MultiDict or None"""
    if payload is None:
        return {}
    return sanitize_dict(dict(payload), redact_text)
