"""
Broker Base Service for TradeJournal

This module defines the interface every OAuth-linked broker integration
implements: the authorization handshake plus read access to accounts and
executions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class BrokerBase(ABC):
    """Abstract base class for broker implementations"""

    @abstractmethod
    def authorization_url(self, redirect_uri: str, state: str) -> str:
        """
        Build the URL the user is sent to for granting access

        Args:
            redirect_uri: Where the broker sends the user back to
            state: Opaque value echoed back on the redirect

        Returns:
            str: Authorization URL
        """
        pass

    @abstractmethod
    def exchange_code(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens

        Args:
            code: Authorization code from the redirect
            redirect_uri: The redirect URI used to obtain the code

        Returns:
            Dict[str, Any]: access_token, refresh_token, expires_in
        """
        pass

    @abstractmethod
    def list_accounts(self, access_token: str) -> List[Dict[str, Any]]:
        """
        Get the broker accounts visible to the token

        Returns:
            List[Dict[str, Any]]: Raw broker account records
        """
        pass

    @abstractmethod
    def list_fills(self, access_token: str, account_id: str) -> List[Dict[str, Any]]:
        """
        Get the executions of one account

        Returns:
            List[Dict[str, Any]]: Raw broker fill records
        """
        pass
