# SPDX-License-Identifier: MIT

import logging
from typing import Any, Optional, cast

import httpx
import pendulum

from beeline import configuration, time
from beeline.model.datapoint import Datapoint, DatapointId
from beeline.model.goal import GoalSummary
from beeline.repository.configuration import CONFIGURATION_REPO

logger = logging.getLogger(__name__)


class BeeminderError(Exception):
    """Base class for failures talking to the Beeminder API."""

    pass


class BeeminderApiError(BeeminderError):
    """
    A request failed, either at the transport level (status is None) or with a
    non-2xx response.
    """

    def __init__(
        self, method: str, path: str, status: Optional[int], detail: str
    ) -> None:
        self.method = method
        self.path = path
        self.status = status
        self.detail = detail
        status_text = f"HTTP {status}" if status is not None else "request failed"
        super().__init__(f"{method} {path}: {status_text}: {detail}")


class BeeminderRepository:
    """
    Remote store of goals and datapoints, backed by the Beeminder REST API.

    The HTTP client is created on first use so that commands which never talk
    to Beeminder do not need an API key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self.__create_client()
        if self._client is None:
            raise ValueError()
        return self._client

    def __create_client(self) -> None:
        api_key = self._api_key
        if api_key is None:
            api_key = configuration.get_api_key()

        base_url = self._base_url
        timeout = self._timeout
        if base_url is None or timeout is None:
            config = CONFIGURATION_REPO.get_config()
            base_url = base_url if base_url is not None else config["api_base_url"]
            timeout = timeout if timeout is not None else config["timeout"]

        self._client = httpx.Client(
            base_url=base_url,
            params={"auth_token": api_key},
            timeout=httpx.Timeout(timeout),
            transport=self._transport,
        )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> Any:
        logger.debug("%s %s params=%s data=%s", method, path, params, data)
        try:
            response = self.client.request(method, path, params=params, data=data)
        except httpx.HTTPError as e:
            raise BeeminderApiError(method, path, None, str(e)) from e

        if response.is_error:
            raise BeeminderApiError(
                method, path, response.status_code, self.__error_detail(response)
            )

        try:
            return response.json()
        except ValueError as e:
            raise BeeminderApiError(
                method, path, response.status_code, "response was not valid JSON"
            ) from e

    def __error_detail(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text.strip() or response.reason_phrase
        if isinstance(body, dict) and "errors" in body:
            return str(body["errors"])
        return str(body)

    def __convert_goal_for_deserialization(self, goal: dict[str, Any]) -> GoalSummary:
        return {
            "slug": goal["slug"],
            "title": goal.get("title") or "",
            "goal_type": goal.get("goal_type"),
            "units": goal.get("gunits"),
            "safebuf": int(goal.get("safebuf") or 0),
            "limsum": goal.get("limsum") or "",
            "lastday": time.datetime_from_unix(goal.get("lastday") or 0),
            "losedate": time.datetime_from_unix_optional(goal.get("losedate")),
            "archived": bool(goal.get("archived", False)),
        }

    def __convert_datapoint_for_deserialization(
        self, datapoint: dict[str, Any]
    ) -> Datapoint:
        return {
            "id": str(datapoint["id"]),
            "timestamp": time.datetime_from_unix(datapoint["timestamp"]),
            "value": float(datapoint["value"]),
            "comment": datapoint.get("comment"),
            "daystamp": datapoint.get("daystamp"),
            "updated_at": time.datetime_from_unix_optional(
                datapoint.get("updated_at")
            ),
            "requestid": datapoint.get("requestid"),
        }

    def __datapoint_form(
        self,
        timestamp: Optional[pendulum.DateTime],
        value: Optional[float],
        comment: Optional[str],
    ) -> dict[str, Any]:
        form: dict[str, Any] = {}
        if timestamp is not None:
            form["timestamp"] = time.datetime_to_unix(timestamp)
        if value is not None:
            form["value"] = repr(value)
        if comment is not None:
            form["comment"] = comment
        return form

    def get_goals_raw(self) -> list[dict[str, Any]]:
        return cast(list[dict[str, Any]], self.__request("GET", "users/me/goals.json"))

    def get_archived_goals_raw(self) -> list[dict[str, Any]]:
        return cast(
            list[dict[str, Any]],
            self.__request("GET", "users/me/goals/archived.json"),
        )

    def get_datapoints_raw(
        self, goal: str, sort: Optional[str] = None, count: Optional[int] = None
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if sort is not None:
            params["sort"] = sort
        if count is not None:
            params["count"] = count
        return cast(
            list[dict[str, Any]],
            self.__request(
                "GET", f"users/me/goals/{goal}/datapoints.json", params=params
            ),
        )

    def get_goals(self) -> list[GoalSummary]:
        return [
            self.__convert_goal_for_deserialization(goal)
            for goal in self.get_goals_raw()
        ]

    def get_archived_goals(self) -> list[GoalSummary]:
        return [
            self.__convert_goal_for_deserialization(goal)
            for goal in self.get_archived_goals_raw()
        ]

    def get_datapoints(
        self, goal: str, sort: Optional[str] = None, count: Optional[int] = None
    ) -> list[Datapoint]:
        return [
            self.__convert_datapoint_for_deserialization(datapoint)
            for datapoint in self.get_datapoints_raw(goal, sort, count)
        ]

    def create_datapoint(
        self,
        goal: str,
        value: float,
        timestamp: Optional[pendulum.DateTime] = None,
        comment: Optional[str] = None,
    ) -> Datapoint:
        created = self.__request(
            "POST",
            f"users/me/goals/{goal}/datapoints.json",
            data=self.__datapoint_form(timestamp, value, comment),
        )
        return self.__convert_datapoint_for_deserialization(created)

    def update_datapoint(
        self,
        goal: str,
        id: DatapointId,
        timestamp: Optional[pendulum.DateTime] = None,
        value: Optional[float] = None,
        comment: Optional[str] = None,
    ) -> Datapoint:
        updated = self.__request(
            "PUT",
            f"users/me/goals/{goal}/datapoints/{id}.json",
            data=self.__datapoint_form(timestamp, value, comment),
        )
        return self.__convert_datapoint_for_deserialization(updated)

    def delete_datapoint(self, goal: str, id: DatapointId) -> Datapoint:
        deleted = self.__request(
            "DELETE", f"users/me/goals/{goal}/datapoints/{id}.json"
        )
        return self.__convert_datapoint_for_deserialization(deleted)


BEEMINDER_REPO = BeeminderRepository()
