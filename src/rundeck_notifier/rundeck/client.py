"""Built-in httpx client for the Rundeck web API.

Authenticates with the form-login session flow (``j_security_check``)
and schedules jobs by group path and name through
``scheduledExecution/runJobByName.xml``. Job scheduling is attempted
exactly once; only the reachability probe retries connection errors.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping

import httpx
import tenacity

from rundeck_notifier.models.config import RundeckConfig
from rundeck_notifier.rundeck.errors import RundeckLoginError, RundeckSchedulingError

logger = logging.getLogger(__name__)

_AUTH_ERROR_STATUS_CODES = {401, 403}
_LOGIN_FAILURE_MARKERS = ("/user/error", "/user/login")
_PROBE_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


class RundeckInstance:
    """Sync httpx client for a Rundeck instance.

    Implements the RundeckClient protocol. The underlying httpx client
    keeps the session cookie between login and scheduling.

    Usage::

        with RundeckInstance(RundeckConfig(url=..., login=..., password=...)) as rd:
            if rd.is_alive():
                url = rd.schedule_job_execution("ops/deploy", "app", {"env": "prod"})
    """

    def __init__(
        self,
        config: RundeckConfig,
        *,
        probe_attempts: int = 2,
        probe_wait: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection settings. Not validated here, see
                is_configuration_valid().
            probe_attempts: Attempts for the is_alive() probe.
            probe_wait: Seconds between probe attempts.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._config = config
        self._probe_attempts = max(1, probe_attempts)
        self._probe_wait = probe_wait
        self._client = httpx.Client(
            timeout=config.timeout,
            follow_redirects=False,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def login(self) -> str:
        return self._config.login

    def is_configuration_valid(self) -> bool:
        return self._config.is_valid()

    def is_alive(self) -> bool:
        """GET the instance root; any non-5xx answer means alive."""
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception_type(_PROBE_ERRORS),
            wait=tenacity.wait_fixed(self._probe_wait),
            stop=tenacity.stop_after_attempt(self._probe_attempts),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            response = retryer(self._client.get, self._config.url or "/")
        except httpx.HTTPError as exc:
            logger.debug("Rundeck at %s is not reachable: %s", self._config.url, exc)
            return False
        return response.status_code < 500

    def is_login_valid(self) -> bool:
        try:
            self._login()
        except RundeckLoginError as exc:
            logger.debug("Rundeck login invalid: %s", exc)
            return False
        return True

    def schedule_job_execution(
        self,
        group_path: str,
        job_name: str,
        options: Mapping[str, str],
    ) -> str:
        """Schedule a job execution and return its follow url.

        Raises:
            RundeckLoginError: On authentication failure.
            RundeckSchedulingError: When Rundeck reports an error, the
                response cannot be understood, or the request fails.
        """
        self._login()

        params: list[tuple[str, str]] = [
            ("groupPath", group_path or ""),
            ("jobName", job_name),
        ]
        for key, value in options.items():
            params.append((f"extra.command.option.{key}", value))

        try:
            response = self._client.get(
                f"{self._config.url}/scheduledExecution/runJobByName.xml",
                params=params,
            )
        except httpx.HTTPError as exc:
            raise RundeckSchedulingError(f"Request failed: {exc}") from exc

        if response.status_code in _AUTH_ERROR_STATUS_CODES or self._is_login_redirect(response):
            raise RundeckLoginError(
                f"Session rejected: HTTP {response.status_code}"
            )
        if response.status_code >= 400:
            raise RundeckSchedulingError(
                f"HTTP {response.status_code} - {response.text}"
            )

        execution_id = self._parse_execution_id(response.text)
        execution_url = f"{self._config.url}/execution/follow/{execution_id}"
        logger.debug("Scheduled %s/%s as %s", group_path, job_name, execution_url)
        return execution_url

    def _login(self) -> None:
        try:
            response = self._client.post(
                f"{self._config.url}/j_security_check",
                data={
                    "j_username": self._config.login,
                    "j_password": self._config.password,
                },
            )
        except httpx.HTTPError as exc:
            raise RundeckLoginError(f"Login request failed: {exc}") from exc

        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise RundeckLoginError(
                f"Authentication failed: HTTP {response.status_code}"
            )
        if self._is_login_redirect(response):
            raise RundeckLoginError(
                f"Authentication failed for user {self._config.login}"
            )
        if response.status_code >= 400:
            raise RundeckLoginError(
                f"Login failed: HTTP {response.status_code} - {response.text}"
            )

    @staticmethod
    def _is_login_redirect(response: httpx.Response) -> bool:
        if not response.is_redirect:
            return False
        location = response.headers.get("Location", "")
        return any(marker in location for marker in _LOGIN_FAILURE_MARKERS)

    @staticmethod
    def _parse_execution_id(body: str) -> str:
        """Extract the execution id from a runJobByName.xml response."""
        try:
            root = ET.fromstring(body)
        except ET.ParseError as exc:
            raise RundeckSchedulingError(
                f"Unexpected response format: {exc}"
            ) from exc

        if root.get("error") == "true" or root.find("error") is not None:
            message = root.findtext(".//error/message") or root.findtext(".//message")
            raise RundeckSchedulingError(message or "Rundeck reported an error")

        execution = root.find(".//execution")
        execution_id = execution.get("id") if execution is not None else None
        if not execution_id:
            execution_id = root.findtext(".//execution/id") or root.findtext(".//id")
        if not execution_id:
            raise RundeckSchedulingError(
                "Unexpected response format: missing execution id"
            )
        return execution_id.strip()

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> RundeckInstance:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __str__(self) -> str:
        return str(self._config)
