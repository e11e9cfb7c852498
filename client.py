"""Thin requests-based client for the YouPower API, used by the action deck."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class YouPowerClient:
    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        r = self.session.request(method, self.base_url + path, headers=headers, timeout=self.timeout, **kwargs)
        if not r.ok:
            logger.warning("%s %s failed: %s %s", method, path, r.status_code, r.text[:200])
        r.raise_for_status()
        return r.json()

    def login(self, email: str, password: str) -> str:
        data = self._request("POST", "/api/user/token", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    def update_profile(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", "/api/user/profile", json=changes)

    def suggested_actions(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/action")

    def action(self, action_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/action/{action_id}")

    def set_action_state(self, action_id: str, state: str,
                         postponed: Optional[datetime] = None) -> Dict[str, Dict[str, Any]]:
        body = {"state": state, "postponed": postponed.isoformat() if postponed else None}
        return self._request("PUT", f"/api/user/action/{action_id}", json=body)

    def comments(self, action_id: str, limit: int = 10, skip: int = 0) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/action/{action_id}/comments", params={"limit": limit, "skip": skip})
