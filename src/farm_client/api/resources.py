"""
Resource wrappers for the farm-management REST API

Thin, typed-by-path helpers over ApiClient. Each call returns the decoded
JSON body; errors propagate from the client unchanged.
"""

import re
from typing import Any, Dict, Optional

from ..utils.error_handler import ValidationError
from ..utils.logging_setup import get_logger
from .client import ApiClient

logger = get_logger('resources')

READ_ONLY_QUERY = re.compile(r'^\s*(select|with)\b', re.IGNORECASE)


def _drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


class Resource:
    """CRUD helper for one collection endpoint"""

    def __init__(self, client: ApiClient, path: str):
        self.client = client
        self.path = "/" + path.strip("/")

    def _item(self, item_id) -> str:
        return f"{self.path}/{item_id}"

    def list(self, **params) -> Any:
        return self.client.get_json(self.path, params=_drop_none(params) or None)

    def get(self, item_id) -> Any:
        return self.client.get_json(self._item(item_id))

    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post_json(self.path, json=data)

    def update(self, item_id, data: Dict[str, Any]) -> Any:
        return self.client.put_json(self._item(item_id), json=data)

    def delete(self, item_id) -> Any:
        return self.client.delete_json(self._item(item_id))


class NotificationsResource(Resource):
    """Farmer notifications"""

    def __init__(self, client: ApiClient):
        super().__init__(client, "/notifications")

    def list(self, limit: Optional[int] = None, unread_only: Optional[bool] = None) -> Any:
        params = {"limit": limit}
        if unread_only is not None:
            params["unreadOnly"] = str(unread_only).lower()
        return super().list(**params)

    def unread_count(self) -> int:
        data = self.client.get_json(f"{self.path}/unread-count")
        return int(data.get("unreadCount", 0))

    def mark_read(self, notification_id) -> Any:
        return self.client.put_json(f"{self._item(notification_id)}/read")

    def mark_all_read(self) -> Any:
        return self.client.put_json(f"{self.path}/read-all")

    def clear_all(self) -> Any:
        return self.client.delete_json(self.path)


class WeatherResource:
    """Weather data and alerts for the farmer's farms"""

    def __init__(self, client: ApiClient):
        self.client = client

    def alerts(self, unread_only: bool = False, limit: Optional[int] = None) -> Any:
        params = _drop_none({"unread_only": "true" if unread_only else None, "limit": limit})
        return self.client.get_json("/weather/alerts", params=params or None)

    def mark_alert_read(self, alert_id) -> Any:
        return self.client.put_json(f"/weather/alerts/{alert_id}/read")

    def current(self, farm_id) -> Any:
        return self.client.get_json(f"/weather/current/{farm_id}")

    def forecast(self, farm_id) -> Any:
        return self.client.get_json(f"/weather/forecast/{farm_id}")

    def preferences(self) -> Any:
        return self.client.get_json("/weather/preferences")

    def update_preferences(self, preferences: Dict[str, Any]) -> Any:
        return self.client.put_json("/weather/preferences", json=preferences)

    def refresh(self) -> Any:
        return self.client.post_json("/weather/refresh")


class AdminResource:
    """Administration endpoints; every path is admin-scoped"""

    ANALYTICS = ("overview", "revenue", "crops", "top-farmers")

    def __init__(self, client: ApiClient):
        self.client = client

    def farmers(self, limit: Optional[int] = None, **params) -> Any:
        return self.client.get_json("/admin/farmers", params=_drop_none(dict(params, limit=limit)) or None)

    def farmer(self, farmer_id) -> Any:
        return self.client.get_json(f"/admin/farmers/{farmer_id}")

    def set_farmer_status(self, farmer_id, status: str) -> Any:
        return self.client.put_json(f"/admin/farmers/{farmer_id}/status", json={"status": status})

    def users(self) -> Any:
        return self.client.get_json("/admin/users")

    def create_user(self, data: Dict[str, Any]) -> Any:
        return self.client.post_json("/admin/users", json=data)

    def set_user_role(self, admin_id, role: str) -> Any:
        return self.client.put_json(f"/admin/users/{admin_id}/role", json={"role": role})

    def delete_user(self, admin_id) -> Any:
        return self.client.delete_json(f"/admin/users/{admin_id}")

    def stats(self) -> Any:
        return self.client.get_json("/admin/stats")

    def analytics(self, name: str, **params) -> Any:
        if name not in self.ANALYTICS:
            raise ValidationError(f"Unknown analytics report: {name}")
        return self.client.get_json(f"/admin/analytics/{name}", params=_drop_none(params) or None)

    def sensor_readings(self, **params) -> Any:
        return self.client.get_json("/admin/sensors/readings", params=_drop_none(params) or None)

    def sensor_alerts(self, **params) -> Any:
        return self.client.get_json("/admin/sensors/alerts", params=_drop_none(params) or None)

    def sensor_stats(self) -> Any:
        return self.client.get_json("/admin/sensors/stats")

    def send_alert(self, data: Dict[str, Any]) -> Any:
        return self.client.post_json("/admin/alerts/send", json=data)

    def broadcast_alert(self, data: Dict[str, Any]) -> Any:
        return self.client.post_json("/admin/alerts/broadcast", json=data)

    def alert_history(self, **params) -> Any:
        return self.client.get_json("/admin/alerts/history", params=_drop_none(params) or None)

    def execute_query(self, query: str) -> Any:
        """Run an ad-hoc read-only SQL query"""
        if not query or not READ_ONLY_QUERY.match(query):
            raise ValidationError("Only SELECT queries are allowed")
        logger.info("Executing admin query")
        return self.client.post_json("/admin/query/execute", json={"query": query})


class FarmApi:
    """Entry point bundling every resource of the backend"""

    def __init__(self, client: ApiClient):
        self.client = client
        self.farms = Resource(client, "/farms")
        self.crops = Resource(client, "/crops")
        self.sales = Resource(client, "/sales")
        self.fertilizers = Resource(client, "/fertilizers")
        self.equipment = Resource(client, "/equipment")
        self.labours = Resource(client, "/labours")
        self.labour_work = Resource(client, "/labour-work")
        self.sensors = Resource(client, "/sensors")
        self.notifications = NotificationsResource(client)
        self.weather = WeatherResource(client)
        self.admin = AdminResource(client)

    def farm_crops(self, farm_id) -> Any:
        return self.crops.list(farm_id=farm_id)

    def labour_work_summary(self) -> Any:
        return self.client.get_json("/labour-work/summary")

    def farmer_profile(self) -> Any:
        return self.client.get_json("/farmers/profile")

    def update_farmer_profile(self, data: Dict[str, Any]) -> Any:
        return self.client.put_json("/farmers/profile", json=data)

    def farm_comparison(self) -> Any:
        return self.client.get_json("/analytics/farm-comparison")

    def financial_analytics(self) -> Any:
        return self.client.get_json("/analytics/financial")

    def sensor_thresholds(self) -> Any:
        return self.client.get_json("/sensors/thresholds")

    def update_sensor_thresholds(self, data: Dict[str, Any]) -> Any:
        return self.client.put_json("/sensors/thresholds", json=data)
