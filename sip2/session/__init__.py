"""Session orchestration package for the SIP2 client.

This package sequences protocol calls into a terminal conversation:
- Login and self check (SC status / ACS status)
- Patron session start/end with cached status and information
- Convenience accessors (validity, fines, screen messages, item lists)
- Printable reports for the command-line tool
"""

from sip2.session.patron import ITEM_FIELDS, PatronSession
from sip2.session.report import AcsStatusReport, PatronReport

__all__ = [
    "AcsStatusReport",
    "ITEM_FIELDS",
    "PatronReport",
    "PatronSession",
]
