"""
Test the logging sanitizer utility.
Verifies passwords and payment secrets are redacted before registration and payment payloads are logged.
"""

from werkzeug.datastructures import ImmutableMultiDict

from app.utils.logging_sanitizer import (
    SENSITIVE_FIELDS,
    sanitize_dict,
    sanitize_payload,
)


def test_sanitize_dict():
    """Test dictionary sanitization"""
    test_data = {
        'name': 'Rina Das',
        'email': 'rina@acme.test',
        'password': 'secret123',
    }
    result = sanitize_dict(test_data)
    assert result['name'] == 'Rina Das', "Name should not be redacted"
    assert result['email'] == 'rina@acme.test', "Email should not be redacted"
    assert result['password'] == '[REDACTED]', "Password should be redacted"

    # Case insensitivity
    result = sanitize_dict({'Password': 'a', 'PASSWORD': 'b', 'Client_Secret': 'c'})
    assert result == {'Password': '[REDACTED]', 'PASSWORD': '[REDACTED]', 'Client_Secret': '[REDACTED]'}

    # Nested dictionaries and lists of dictionaries
    test_data = {
        'user': {'email': 'hr@acme.test', 'password': 'secret123'},
        'intents': [{'id': 'pi_1', 'client_secret': 'pi_1_secret'}],
    }
    result = sanitize_dict(test_data)
    assert result['user']['email'] == 'hr@acme.test'
    assert result['user']['password'] == '[REDACTED]'
    assert result['intents'][0]['id'] == 'pi_1'
    assert result['intents'][0]['client_secret'] == '[REDACTED]'


def test_sanitize_dict_does_not_mutate_input():
    data = {'password': 'secret123'}
    sanitize_dict(data)
    assert data['password'] == 'secret123'


def test_sanitize_payload():
    """JSON bodies and form MultiDicts are both accepted"""
    assert sanitize_payload(None) == {}

    result = sanitize_payload({'email': 'emp@acme.test', 'password': 'secret123'})
    assert result == {'email': 'emp@acme.test', 'password': '[REDACTED]'}

    form_data = ImmutableMultiDict([
        ('email', 'emp@acme.test'),
        ('password', 'secret123'),
    ])
    result = sanitize_payload(form_data)
    assert result['email'] == 'emp@acme.test'
    assert result['password'] == '[REDACTED]'


def test_all_sensitive_fields():
    """Verify all sensitive fields are properly configured"""
    test_data = {field: f"sensitive_{field}_value" for field in SENSITIVE_FIELDS}

    result = sanitize_dict(test_data)

    for field in SENSITIVE_FIELDS:
        assert result[field] == '[REDACTED]', f"Field '{field}' should be redacted"

