"""In-memory registry mapping opaque session tokens to Azure DevOps clients."""

import logging
import secrets
import threading

from src.azure.client import AzureDevOpsClient

logger = logging.getLogger(__name__)


class SessionStore:
    """Token -> client map; sessions live until logout or process exit."""

    def __init__(self) -> None:
        self._clients: dict[str, AzureDevOpsClient] = {}
        self._lock = threading.Lock()

    def create(self, client: AzureDevOpsClient) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._clients[token] = client
        logger.info("Session created for %s/%s.", client.organization, client.project)
        return token

    def get(self, token: str) -> AzureDevOpsClient | None:
        with self._lock:
            return self._clients.get(token)

    def remove(self, token: str) -> bool:
        with self._lock:
            client = self._clients.pop(token, None)
        if client is not None:
            logger.info("Session removed for %s/%s.", client.organization, client.project)
        return client is not None


sessions = SessionStore()
