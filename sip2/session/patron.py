"""Patron session orchestration over a Sip2Client.

Sequences the usual self-check conversation:
  login -> SC status (self check) -> patron status -> patron information ... -> end session

Unlike the protocol engine, this layer interprets response flags and
raises SessionError when the backend refuses an operation.
"""

import logging

from sip2.catalog import requests, responses
from sip2.client import Sip2Client
from sip2.common.errors import SessionError
from sip2.wire.parser import ParsedResponse

logger = logging.getLogger(__name__)

# Patron information category -> variable field holding its item ids
ITEM_FIELDS: dict[str, str] = {
    "hold": "AS",
    "overdue": "AT",
    "charged": "AU",
    "fine": "AV",
    "recall": "BU",
    "unavail": "CD",
}


class PatronSession:
    """Login/self-check bookkeeping plus one patron session at a time.

    Patron status and per-category patron information are fetched lazily
    and cached until the session ends.
    """

    def __init__(self, client: Sip2Client) -> None:
        self.client = client
        self._in_session = False
        self._acs_status: ParsedResponse | None = None
        self._status: ParsedResponse | None = None
        self._information: dict[str, ParsedResponse] = {}

    @property
    def in_session(self) -> bool:
        return self._in_session

    @property
    def acs_status(self) -> ParsedResponse | None:
        """ACS status from the last self check, if any."""
        return self._acs_status

    def login(self, user: str, password: str, self_check: bool = True) -> None:
        """Log the terminal in, then optionally run the self check.

        Raises:
            SessionError: If the backend refuses the login or is offline.
        """
        result = self.client.call(requests.login, responses.parse_login_response, user, password)
        if result.fixed["ok"] != "1":
            raise SessionError(f"Login failed for {user!r}")
        logger.info(f"Logged in as {user!r}")

        if self_check:
            self.self_check()

    def self_check(self) -> ParsedResponse:
        """Send SC status and record the ACS status.

        Raises:
            SessionError: If the backend reports itself offline.
        """
        status = self.client.call(requests.sc_status, responses.parse_acs_status)
        self._acs_status = status
        if status.fixed["online"] != "Y":
            raise SessionError("ACS Offline")
        logger.info(f"ACS online (protocol {status.fixed['protocol']})")
        return status

    def start(self, patron_id: str, password: str) -> bool:
        """Begin a patron session, ending any open one first.

        Returns True if the backend reports the patron and password as valid.
        """
        if self._in_session:
            self.end()

        self.client.config.patron_id = patron_id
        self.client.config.patron_password = password
        self._fetch_status()
        self._in_session = self._patron_valid()
        if self._in_session:
            logger.info(f"Patron session started for {patron_id!r}")
        else:
            logger.warning(f"Patron {patron_id!r} rejected")
            self._clear()
        return self._in_session

    def end(self) -> None:
        """End the patron session.

        Raises:
            SessionError: If the backend does not confirm the end of session.
        """
        result = self.client.call(requests.end_patron_session, responses.parse_end_session_response)
        if result.fixed["end_session"] != "Y":
            raise SessionError("Error ending patron session")
        logger.info(f"Patron session ended for {self.client.config.patron_id!r}")
        self._in_session = False
        self._clear()

    def _clear(self) -> None:
        self._status = None
        self._information = {}

    def _require_session(self, operation: str) -> None:
        if not self._in_session:
            raise SessionError(f"Must start patron session before calling {operation}")

    def _fetch_status(self) -> ParsedResponse:
        self._status = self.client.call(
            requests.patron_status, responses.parse_patron_status_response
        )
        return self._status

    def _patron_valid(self) -> bool:
        assert self._status is not None
        return self._status.first("BL") == "Y" and self._status.first("CQ") == "Y"

    @property
    def status(self) -> ParsedResponse:
        """Cached Patron Status Response for the current patron."""
        self._require_session("status")
        if self._status is None:
            self._fetch_status()
        assert self._status is not None
        return self._status

    def information(self, category: str = "none") -> ParsedResponse:
        """Cached Patron Information Response for one item category."""
        self._require_session("information")
        if category not in self._information:
            self._information[category] = self.client.call(
                requests.patron_information,
                responses.parse_patron_info_response,
                category,
            )
        return self._information[category]

    @property
    def is_valid(self) -> bool:
        self._require_session("is_valid")
        return self._patron_valid()

    @property
    def fines_total(self) -> float:
        amount = self.status.first("BV")
        if not amount:
            return 0.0
        try:
            return float(amount)
        except ValueError:
            logger.warning(f"Unparseable fee amount {amount!r}")
            return 0.0

    @property
    def screen_messages(self) -> tuple[str, ...]:
        return self.status.values("AF")

    def items(self, category: str) -> tuple[str, ...]:
        """Item ids for one patron information category."""
        field_code = ITEM_FIELDS.get(category)
        if field_code is None:
            raise ValueError(f"Unknown item category {category!r}. Valid: {list(ITEM_FIELDS)}")
        return self.information(category).values(field_code)

    @property
    def hold_items(self) -> tuple[str, ...]:
        return self.items("hold")

    @property
    def overdue_items(self) -> tuple[str, ...]:
        return self.items("overdue")

    @property
    def charged_items(self) -> tuple[str, ...]:
        return self.items("charged")

    @property
    def fine_items(self) -> tuple[str, ...]:
        return self.items("fine")

    @property
    def recall_items(self) -> tuple[str, ...]:
        return self.items("recall")

    @property
    def unavailable_items(self) -> tuple[str, ...]:
        return self.items("unavail")
