"""
Handle extraction from social profile URLs.
"""
import re

_PATTERNS = {
    'X': [r'(?:twitter\.com|x\.com)/([a-zA-Z0-9_]+)'],
    'YouTube': [
        r'youtube\.com/@([a-zA-Z0-9_-]+)',
        r'youtube\.com/c/([a-zA-Z0-9_-]+)',
        r'youtube\.com/channel/([a-zA-Z0-9_-]+)',
        r'youtu\.be/([a-zA-Z0-9_-]+)',
    ],
    'Instagram': [r'instagram\.com/([a-zA-Z0-9._]+)'],
    'LinkedIn': [r'linkedin\.com/in/([a-zA-Z0-9-]+)'],
}


def extract_handle(platform, value):
    """
    Pull the account handle out of a profile URL.

    Bare handles (no '/' or '.') are returned without their leading '@'.
    URLs that match none of the platform's patterns are treated as handles.
    """
    cleaned = (value or '').strip()

    if '/' not in cleaned and '.' not in cleaned:
        return cleaned.lstrip('@')

    patterns = _PATTERNS.get(platform)
    if patterns is None:
        raise ValueError(f"Unsupported platform: {platform}")

    for pattern in patterns:
        match = re.search(pattern, cleaned)
        if match:
            return match.group(1).rstrip('/')

    return cleaned.lstrip('@')


def is_valid_handle(handle):
    return bool(handle) and len(handle) < 100 and ' ' not in handle
