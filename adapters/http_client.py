import requests
from typing import Optional, Tuple, Dict
from requests.exceptions import RequestException
from infrastructure.telemetry import get_tracer
from requests import Session


class HTTPClientAdapter:
    """Adapter for making HTTP GET requests with telemetry and a bounded timeout.

    Requests are issued once; there is no retry or backoff.
    """

    def __init__(
        self,
        timeout: float = 30,
        user_agent: str = "EntryViewer/1.0",
        verify_ssl: bool = True,
        session: Optional[Session] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl
        self.session = session if session is not None else requests.Session()
        self.headers = {"User-Agent": user_agent, "Cache-Control": "no-cache"}

    def get(
        self, url: str, params: Optional[Dict[str, str]] = None
    ) -> Tuple[str, str, int]:
        """
        Perform HTTP GET request and return content.

        Args:
            url: Endpoint to call
            params: Query string parameters

        Returns:
            Tuple of (content_type, content, status_code)

        Raises:
            RequestException: On connection failures and timeouts
        """
        with get_tracer().start_as_current_span("http.get") as span:
            span.set_attribute("url", url)
            if params:
                span.set_attribute("query.keys", ",".join(sorted(params)))

            try:
                response = self.session.get(
                    url,
                    params=params,
                    timeout=self.timeout,
                    headers=self.headers,
                    verify=self.verify_ssl,
                )
            except RequestException as e:
                span.set_attribute("error", str(e))
                raise

            content_type = response.headers.get("Content-Type", "")
            content = response.text
            status_code = response.status_code

            span.set_attributes(
                {
                    "status_code": status_code,
                    "content_length": len(content),
                    "content_type": content_type,
                }
            )
            return (content_type, content, status_code)
