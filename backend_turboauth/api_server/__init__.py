"""
API server package — HTTP/REST interface over the wallet authorization registry.

Reads are public; mutations require the X-Caller-Address header to match the
current admin (enforced by AuthorizedRegistry).
"""
