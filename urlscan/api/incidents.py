"""
Incident endpoints (Pro).

Incidents track an observable (hostname, domain, IP, URL) over time.
"""

from typing import Any

from urlscan.constants import Endpoints

from .base import BaseApi, path_param, require, unwrap_key


class IncidentsApi(BaseApi):
    """Create, inspect and manage the lifecycle of incidents."""

    async def create_incident(self, incident: dict[str, Any]) -> dict[str, Any]:
        payload = await self._post_json(Endpoints.INCIDENTS, {"incident": incident})
        return unwrap_key(payload, "incident", payload)

    async def get_incident(self, incident_id: str) -> dict[str, Any]:
        require(bool(incident_id), "Incident ID cannot be blank")
        payload = await self._get_json(self._incident_path(incident_id))
        return unwrap_key(payload, "incident", payload)

    async def update_incident(self, incident_id: str, incident: dict[str, Any]) -> dict[str, Any]:
        require(bool(incident_id), "Incident ID cannot be blank")
        payload = await self._put_json(self._incident_path(incident_id), {"incident": incident})
        return unwrap_key(payload, "incident", payload)

    async def close_incident(self, incident_id: str) -> dict[str, Any]:
        return await self._action(incident_id, "close", "PUT")

    async def restart_incident(self, incident_id: str) -> dict[str, Any]:
        return await self._action(incident_id, "restart", "PUT")

    async def copy_incident(self, incident_id: str) -> dict[str, Any]:
        """Create a new incident with the same settings."""
        return await self._action(incident_id, "copy", "POST")

    async def fork_incident(self, incident_id: str) -> dict[str, Any]:
        """Copy an incident together with its history."""
        return await self._action(incident_id, "fork", "POST")

    async def get_watchable_attributes(self) -> list[str]:
        payload = await self._get_json(Endpoints.WATCHABLE_ATTRIBUTES)
        return list(unwrap_key(payload, "attributes", []))

    async def get_incident_states(self, incident_id: str) -> list[dict[str, Any]]:
        """History of state snapshots for an incident."""
        require(bool(incident_id), "Incident ID cannot be blank")
        payload = await self._get_json(
            Endpoints.INCIDENT_STATES.format(incident_id=path_param(incident_id))
        )
        return list(unwrap_key(payload, "incidentstates", []))

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _incident_path(incident_id: str) -> str:
        return Endpoints.INCIDENT.format(incident_id=path_param(incident_id))

    async def _action(self, incident_id: str, action: str, method: str) -> dict[str, Any]:
        require(bool(incident_id), "Incident ID cannot be blank")
        path = Endpoints.INCIDENT_ACTION.format(incident_id=path_param(incident_id), action=action)
        payload = await self._request_json(method, path, json_body={})
        return unwrap_key(payload, "incident", payload)
