import logging

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class SMSGatewayError(Exception):
    """Raised when the SMS gateway cannot be reached or rejects a request."""


class SMSGatewayClient:
    """
    Client for the android-sms-gateway 3rd-party HTTP API.

    A whole batch of phone numbers is sent in a single message request. The
    gateway answers with a message id and a state for every recipient, which
    is what callers use to count delivered and failed recipients.
    """

    def __init__(self, username: str, password: str, base_url: str = None):
        self.username = username
        self.base_url = (base_url or settings.SMS_GATEWAY_URL).rstrip("/")
        self.timeout = settings.SMS_GATEWAY_TIMEOUT
        self.session = requests.Session()
        self.session.auth = (username, password)

        # Retry connection failures and gateway-side outages only; a request
        # that reached the gateway and timed out is not sent twice.
        retries = Retry(
            total=settings.SMS_GATEWAY_MAX_RETRIES,
            connect=settings.SMS_GATEWAY_MAX_RETRIES,
            read=0,
            backoff_factor=0.5,
            status_forcelist=(502, 503, 504),
            allowed_methods=None,
        )
        self.session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session.mount("http://", HTTPAdapter(max_retries=retries))

    def send(self, message: str, phone_numbers: list) -> dict:
        """
        Send one message to a batch of phone numbers.

        Args:
            message: SMS body
            phone_numbers: Numbers in international format (+63XXXXXXXXXX)

        Returns:
            dict: Contains 'id', 'state' and 'recipients' (list of
            {'phoneNumber', 'state', 'error'})

        Raises:
            SMSGatewayError: If the gateway is unreachable or answers with an error
        """
        payload = {
            "message": message,
            "phoneNumbers": phone_numbers,
            "withDeliveryReport": True,
            "ttl": settings.SMS_MESSAGE_TTL,
        }
        logger.info(
            f"Sending SMS to {len(phone_numbers)} recipients ({len(message)} chars) as {self.username}"
        )
        data = self._request("post", "/message", json=payload)
        logger.info(f"SMS accepted by gateway: id={data.get('id')} state={data.get('state')}")
        return data

    def get_state(self, message_id: str) -> dict:
        """Look up the delivery state of a previously sent message."""
        return self._request("get", f"/message/{message_id}")

    def health(self) -> dict:
        """Check that the gateway is reachable and the credentials are accepted."""
        return self._request("get", "/health")

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = getattr(self.session, method)(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"SMS gateway request to {url} failed: {str(e)}")
            raise SMSGatewayError(f"Network error contacting SMS gateway: {str(e)}") from e

        if response.status_code == 401:
            raise SMSGatewayError("Authentication failed. Please check your username and password.")
        if response.status_code >= 400:
            logger.error(f"SMS gateway returned {response.status_code} for {url}: {response.text}")
            raise SMSGatewayError(f"SMS gateway error: HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError:
            return {}
