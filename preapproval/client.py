"""HTTP client for the pre-approval verification endpoints.

Two calls gate the end of the wizard: sending the verification email and
confirming the emailed code together with the full application. Each is a
single request with no retry; the user retries by submitting again.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please check your connection and try again."
EMAIL_FAILED = "Failed to send verification code."
SUBMIT_FAILED = "Submission failed. Please try again."
INVALID_CODE = "Invalid verification code"


class EmailVerification(BaseModel):
    """Result of requesting a verification email."""

    ok: bool
    token: str | None = None
    message: str = ""


class PreApprovalOutcome(BaseModel):
    """Estimate computed by the backend. Amounts are absent when not approved."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    max_purchase_price: float | None = Field(default=None, alias="maxPurchasePrice")
    loan_amount: float | None = Field(default=None, alias="loanAmount")
    interest_rate: str | None = Field(default=None, alias="interestRate")
    reason: str | None = None


class SubmissionResult(BaseModel):
    """Result of confirming the code and submitting the application."""

    ok: bool
    success: bool = False
    invalid_code: bool = False
    message: str = ""
    result: PreApprovalOutcome | None = None


class VerificationClient:
    """Async client for /pre-approval-email and /pre-approval.

    Keeps cookies and the CSRF token for the lifetime of the client; the token
    is sent as x-csrf-token on every POST.
    """

    def __init__(
        self,
        base_url: str,
        prefix: str = "/public",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )
        stripped = prefix.strip("/")
        self._prefix = f"/{stripped}" if stripped else ""
        self._csrf_token: str | None = None

    async def __aenter__(self) -> "VerificationClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_csrf_token(self) -> str | None:
        """Fetch a fresh CSRF token. Returns None when the endpoint is unreachable."""
        try:
            resp = await self._client.get(f"{self._prefix}/csrf-token")
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("CSRF token fetch failed: %s", e)
            return None
        token = data.get("csrfToken") if isinstance(data, dict) else None
        self._csrf_token = token if isinstance(token, str) else None
        return self._csrf_token

    async def request_verification_code(
        self,
        email: str,
        name: str,
        lead: dict[str, Any] | None = None,
    ) -> EmailVerification:
        """Ask the backend to email a verification code.

        lead carries the answers collected so far; the backend may ignore them.
        """
        body = {**(lead or {}), "email": email, "name": name}
        try:
            status, data = await self._post("/pre-approval-email", body)
        except httpx.HTTPError as e:
            logger.warning("Verification email request failed: %s", e)
            return EmailVerification(ok=False, message=NETWORK_ERROR)

        if 200 <= status < 300:
            token = data.get("token")
            return EmailVerification(
                ok=True,
                token=token if isinstance(token, str) else None,
                message=str(data.get("message") or ""),
            )
        logger.info("Verification email rejected: HTTP %s", status)
        return EmailVerification(ok=False, message=EMAIL_FAILED)

    async def confirm_verification_code(self, payload: dict[str, Any]) -> SubmissionResult:
        """Submit the application with the emailed code (payload["code"])."""
        try:
            status, data = await self._post("/pre-approval", payload)
        except httpx.HTTPError as e:
            logger.warning("Pre-approval submission failed: %s", e)
            return SubmissionResult(ok=False, message=NETWORK_ERROR)

        if 200 <= status < 300:
            raw_result = data.get("result")
            outcome = None
            if isinstance(raw_result, dict) and raw_result.get("status"):
                try:
                    outcome = PreApprovalOutcome.model_validate(raw_result)
                except ValidationError as e:
                    logger.warning("Malformed pre-approval result: %s", e)
                    return SubmissionResult(ok=False, message=SUBMIT_FAILED)
            return SubmissionResult(
                ok=True,
                success=bool(data.get("success")),
                message=str(data.get("message") or ""),
                result=outcome,
            )

        invalid = bool(data.get("invalidCode"))
        logger.info("Pre-approval submission rejected: HTTP %s", status)
        return SubmissionResult(
            ok=False,
            invalid_code=invalid,
            message=INVALID_CODE if invalid else SUBMIT_FAILED,
        )

    async def _post(self, path: str, body: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        """POST JSON with the CSRF header. Returns (status, JSON object or {})."""
        if self._csrf_token is None:
            await self.fetch_csrf_token()
        headers = {"x-csrf-token": self._csrf_token} if self._csrf_token else {}
        resp = await self._client.post(f"{self._prefix}{path}", json=body, headers=headers)
        try:
            data = resp.json()
        except ValueError:
            data = {}
        return resp.status_code, data if isinstance(data, dict) else {}
