"""
URL canonicalization used as the duplicate key when culling.
"""

import re

_INSECURE_SCHEME = re.compile(r'^http://', re.IGNORECASE)
# Tracking parameters Pocket keeps on shared YouTube and newsletter links
_TRACKING_PARAM = re.compile(
    r'(?<=[?&])(?:feature=(?:g-u|youtu\.be|youtube_gdata)|utm_[a-z]+=[^&#]*)(?=[&#]|$)'
)
_AMPERSANDS = re.compile(r'&{2,}')


def _clean_once(url):
    url = _INSECURE_SCHEME.sub('https://', url)
    if url.endswith('&a'):
        url = url[:-2]
    url = _TRACKING_PARAM.sub('', url)
    url = _AMPERSANDS.sub('&', url)
    url = url.replace('?&', '?')
    return url.rstrip('&?/')


def canonicalize(url):
    """
    Normalize url into a comparison key.

    Forces https, drops known tracking parameters, collapses repeated '&'
    and strips trailing '&', '?' and '/'. The steps repeat until nothing
    changes, so canonicalize(canonicalize(u)) == canonicalize(u).
    """
    while True:
        cleaned = _clean_once(url)
        if cleaned == url:
            return url
        url = cleaned
