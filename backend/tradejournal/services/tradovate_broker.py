"""
Tradovate Broker Service for TradeJournal

This module implements the broker interface for Tradovate's OAuth and REST
API, for either the demo or the live environment.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from tradejournal.core.config import Settings
from tradejournal.core.exceptions import ConfigurationError, UpstreamError
from tradejournal.monitoring.logger import get_logger
from tradejournal.services.broker_base import BrokerBase

# Broker traffic also goes to its own rotating file when file logging is on
logger = get_logger("tradovate")


class TradovateBroker(BrokerBase):
    """Tradovate broker implementation"""

    def __init__(self, environment: str, settings: Settings, session: Optional[requests.Session] = None):
        """
        Initialize the Tradovate broker

        Args:
            environment: 'demo' or 'live'
            settings: Application settings holding the OAuth credentials
            session: Optional HTTP session
        """
        self.environment = environment
        self.base_url = settings.tradovate_base_url(environment)
        self.api_url = f"{self.base_url}/v1"
        self.client_id = settings.tradovate_client_id(environment)
        self.client_secret = settings.tradovate_client_secret(environment)
        self.timeout = settings.tradovate_timeout
        self.session = session or requests.Session()

    def _require_client_id(self) -> str:
        if not self.client_id:
            logger.error(f"Tradovate {self.environment} client id is not configured")
            raise ConfigurationError("Tradovate API credentials not configured. Please contact administrator.")
        return self.client_id

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        """
        Build the Tradovate OAuth authorization URL

        Returns:
            str: Authorization URL
        """
        query = urlencode({
            "client_id": self._require_client_id(),
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "state": state,
        })
        return f"{self.base_url}/auth/oauthauthorize?{query}"

    def exchange_code(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens

        Returns:
            Dict[str, Any]: access_token, refresh_token, expires_in

        Raises:
            UpstreamError: If Tradovate rejects the exchange
        """
        if not self.client_id or not self.client_secret:
            logger.error(f"Tradovate {self.environment} credentials are not configured")
            raise ConfigurationError("Tradovate credentials not configured")

        response = self._request(
            "post",
            f"{self.base_url}/auth/oauthtoken",
            json={
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
            error_message="Failed to exchange authorization code",
        )
        return response.json()

    def list_accounts(self, access_token: str) -> List[Dict[str, Any]]:
        """
        Get the Tradovate accounts of the token owner

        Raises:
            UpstreamError: If the request fails
        """
        response = self._request(
            "get",
            f"{self.api_url}/account/list",
            headers=self._auth_headers(access_token),
            error_message="Failed to fetch accounts from Tradovate",
        )
        return response.json()

    def list_fills(self, access_token: str, account_id: str) -> List[Dict[str, Any]]:
        """
        Get the fills of one Tradovate account

        Raises:
            UpstreamError: If the request fails
        """
        response = self._request(
            "get",
            f"{self.api_url}/fill/list",
            headers=self._auth_headers(access_token),
            params={"accountId": account_id},
            error_message="Failed to fetch fills from Tradovate",
        )
        return response.json()

    def _auth_headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, url: str, error_message: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Tradovate request to {url} failed: {str(e)}")
            raise UpstreamError(error_message)

        if not response.ok:
            logger.error(f"Tradovate request to {url} returned {response.status_code}: {response.text}")
            raise UpstreamError(error_message, upstream_status=response.status_code, upstream_body=response.text)
        return response
