"""Google Analytics Admin API: the properties a connected user can read."""

from __future__ import annotations

import logging
from typing import List

import httpx

from datapal.core.errors import UpstreamError
from datapal.models.integration_model import GAProperty

logger = logging.getLogger("datapal.ga.client")

GA_ADMIN_API_BASE = "https://analyticsadmin.googleapis.com/v1beta"


async def list_properties(client: httpx.AsyncClient, access_token: str) -> List[GAProperty]:
    """Flatten ``accountSummaries`` into one list of GA4 properties."""
    headers = {"Authorization": f"Bearer {access_token}"}
    params = {"pageSize": 200}
    properties: List[GAProperty] = []

    while True:
        resp = await client.get(f"{GA_ADMIN_API_BASE}/accountSummaries", headers=headers, params=params)
        if resp.status_code != 200:
            raise UpstreamError(f"Failed to fetch account summaries: {resp.status_code} - {resp.text}")

        data = resp.json()
        for account in data.get("accountSummaries", []):
            for prop in account.get("propertySummaries", []):
                properties.append(
                    GAProperty(
                        property_id=(prop.get("property") or "").replace("properties/", ""),
                        display_name=prop.get("displayName") or "Unnamed Property",
                        parent=account.get("account"),
                    )
                )

        token = data.get("nextPageToken")
        if not token:
            break
        params = {"pageSize": 200, "pageToken": token}

    logger.info("GA account summaries: %d properties", len(properties))
    return properties
