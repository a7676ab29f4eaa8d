"""
YNAB API client implementation.
"""

import json
import logging
from dataclasses import dataclass, field
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..schemas.ynab_payload import NewTransaction, PostTransactionsWrapper

logger = logging.getLogger(__name__)


class YnabError(Exception):
    """Base exception for YNAB client errors."""

    pass


class YnabAPIError(YnabError):
    """API returned an error response.

    YNAB error bodies look like
    {"error": {"id": "400", "name": "bad_request", "detail": "..."}};
    `detail` is surfaced unmodified.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        error_id: str | None = None,
        error_name: str | None = None,
        response_body: str | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.error_id = error_id
        self.error_name = error_name
        self.response_body = response_body

        label = f" ({error_name})" if error_name else ""
        super().__init__(f"YNAB API error {status_code}{label}: {message}")


class YnabConnectionError(YnabError):
    """Failed to connect to YNAB."""

    pass


@dataclass
class YnabAccount:
    """YNAB account representation."""

    id: str
    name: str
    type: str
    on_budget: bool = True
    closed: bool = False
    balance: int = 0  # Milliunits


@dataclass
class SaveTransactionsResult:
    """Outcome of a bulk create.

    transaction_ids: IDs of transactions YNAB created
    duplicate_import_ids: import_ids YNAB had already seen and skipped
    """

    transaction_ids: list[str] = field(default_factory=list)
    duplicate_import_ids: list[str] = field(default_factory=list)
    server_knowledge: int | None = None


class YnabClient:
    """
    Client for the YNAB API.

    Exposes exactly what the importer needs:
    - List accounts of a budget
    - Bulk create transactions

    GET requests are retried with backoff on 429/5xx. The bulk create POST is
    never retried here; a failed submission surfaces as a single YnabError.
    """

    DEFAULT_BASE_URL = "https://api.ynab.com/v1"
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ):
        """
        Initialize YNAB client.

        Args:
            token: Personal access token
            base_url: YNAB API URL including the version prefix
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for GET requests
            backoff_factor: Backoff factor for retries
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # Configure session with retry
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    @classmethod
    def from_config(cls, config) -> "YnabClient":
        """Create a client from the application Config."""
        return cls(
            token=config.ynab.api_key,
            base_url=config.ynab.base_url,
            timeout=config.ynab.timeout_seconds,
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        json_data: dict | None = None,
    ) -> requests.Response:
        """Make an API request with error handling."""
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"API Request: {method} {url}")
        if json_data:
            logger.debug(f"Request body: {json.dumps(json_data, indent=2)}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error to {url}: {e}")
            raise YnabConnectionError(f"Failed to connect to YNAB at {self.base_url}: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout for {url}: {e}")
            raise YnabConnectionError(f"Request to YNAB timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error for {url}: {e}")
            raise YnabError(f"Request failed: {e}") from e

        logger.debug(f"Response status: {response.status_code}")

        if not response.ok:
            error_body = response.text
            error_id = None
            error_name = None

            try:
                error = response.json().get("error") or {}
                message = error.get("detail") or response.reason
                error_id = error.get("id")
                error_name = error.get("name")
            except (ValueError, AttributeError):
                message = error_body or response.reason

            logger.error(f"API Error {response.status_code}: {message}")
            logger.debug(f"Full response body: {error_body}")

            raise YnabAPIError(
                status_code=response.status_code,
                message=message,
                error_id=error_id,
                error_name=error_name,
                response_body=error_body,
            )

        return response

    @staticmethod
    def _data(response: requests.Response) -> dict:
        """Extract the `data` envelope from a successful response."""
        try:
            body = response.json()
        except ValueError as e:
            raise YnabError(f"YNAB returned a non-JSON response: {e}") from e
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise YnabError("YNAB response is missing the 'data' object")
        return data

    def list_accounts(self, budget_id: str, include_closed: bool = False) -> list[YnabAccount]:
        """
        List accounts of a budget.

        Args:
            budget_id: Budget UUID or "last-used"
            include_closed: Also return closed accounts

        Returns:
            List of YnabAccount (deleted accounts are never returned)
        """
        response = self._request("GET", f"/budgets/{quote(budget_id, safe='')}/accounts")
        data = self._data(response)

        accounts = []
        for item in data.get("accounts", []):
            if item.get("deleted"):
                continue
            if item.get("closed") and not include_closed:
                continue
            accounts.append(
                YnabAccount(
                    id=item.get("id", ""),
                    name=item.get("name", ""),
                    type=item.get("type", ""),
                    on_budget=bool(item.get("on_budget", True)),
                    closed=bool(item.get("closed", False)),
                    balance=int(item.get("balance", 0)),
                )
            )

        return accounts

    def create_transactions(
        self,
        budget_id: str,
        transactions: list[NewTransaction],
    ) -> SaveTransactionsResult:
        """
        Create transactions in one bulk request.

        Args:
            budget_id: Budget UUID or "last-used"
            transactions: Complete batch, submitted as a whole

        Returns:
            SaveTransactionsResult with created IDs and duplicate import_ids

        Raises:
            YnabAPIError: If API returns an error
            YnabConnectionError: If YNAB cannot be reached
        """
        payload = PostTransactionsWrapper(transactions=transactions)
        response = self._request(
            "POST",
            f"/budgets/{quote(budget_id, safe='')}/transactions",
            json_data=payload.to_dict(),
        )
        data = self._data(response)

        result = SaveTransactionsResult(
            transaction_ids=list(data.get("transaction_ids") or []),
            duplicate_import_ids=list(data.get("duplicate_import_ids") or []),
            server_knowledge=data.get("server_knowledge"),
        )

        logger.info(
            f"YNAB created {len(result.transaction_ids)} transaction(s), "
            f"skipped {len(result.duplicate_import_ids)} duplicate(s)"
        )
        return result
