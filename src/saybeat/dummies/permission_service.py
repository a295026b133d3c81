# File: src/saybeat/dummies/permission_service.py
"""Dummy PermissionService - scriptable stand-in for the platform permission API."""

from saybeat.services import PermissionService as BasePermissionService
from saybeat.utilities.phases import PermissionState


class PermissionService(BasePermissionService):
    """Reports a fixed state and lets the host or a test change it.

    Args:
        state: Initial state returned by query().
        grant_on_request: Outcome of request(). None means "leave as is and
            report whether the current state is granted".
        queryable: When False, query() raises NotImplementedError like a
            platform without a permissions API.
    """

    def __init__(self, state=PermissionState.GRANTED, grant_on_request=True, queryable=True):
        self.state = state
        self.grant_on_request = grant_on_request
        self.queryable = queryable
        self.request_count = 0
        self._callbacks = []

    async def query(self):
        if not self.queryable:
            raise NotImplementedError("Permissions API not available")
        return self.state

    def on_change(self, callback):
        self._callbacks.append(callback)

    async def request(self):
        self.request_count += 1
        if self.grant_on_request is None:
            return self.state == PermissionState.GRANTED
        self.state = PermissionState.GRANTED if self.grant_on_request else PermissionState.DENIED
        return self.grant_on_request

    def set_state(self, state):
        """Simulate the user changing the permission in platform settings."""
        self.state = state
        for callback in list(self._callbacks):
            callback(state)
