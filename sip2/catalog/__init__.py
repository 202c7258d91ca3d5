"""Request catalog for the SIP2 client.

- requests: one encoder per request type, returning finalized wire text
- responses: one decoder per response type, plus parse_response dispatch

Note: import the modules directly (``from sip2.catalog import requests``);
encoder and decoder names are not re-exported to keep the two sides apart.
"""

from sip2.catalog import requests, responses

__all__ = ["requests", "responses"]
