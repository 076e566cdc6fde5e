from __future__ import annotations

import contextlib
import json
import logging
import os
from typing import Dict, List, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from fleet import (
    AssignmentFailure,
    BuildingConfig,
    CarConfig,
    DispatchCoordinator,
    Person,
    UnknownCarError,
    build_coordinator,
    event_to_dict,
    load_building_config,
)
from selection import get_policy, policy_name

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LIFT_DISPATCH_CONFIG"


class PolicySelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class PickupRequest(BaseModel):
    person_id: str
    name: str
    origin: int
    destination: int


class MaintenanceUpdate(BaseModel):
    maintenance: bool
    reason: Optional[str] = None


def default_config() -> BuildingConfig:
    return BuildingConfig(
        name="Tech Tower",
        total_floors=10,
        cars=[CarConfig(f"E{i}", capacity=8) for i in range(1, 4)],
    )


class DispatchManager:
    """Holds the building's single coordinator and its event subscribers."""

    def __init__(self, coordinator: DispatchCoordinator) -> None:
        self.coordinator = coordinator
        self.clients: Set[WebSocket] = set()

    @classmethod
    def from_environment(cls) -> "DispatchManager":
        path = os.environ.get(CONFIG_ENV_VAR)
        config = load_building_config(path) if path else default_config()
        return cls(build_coordinator(config))

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        return {
            "building": self.coordinator.building_name,
            "total_floors": self.coordinator.total_floors,
            "policy": policy_name(self.coordinator.policy) if self.coordinator.policy else None,
            "cars": [status.to_dict() for status in self.coordinator.status()],
        }

    def request_pickup(self, body: PickupRequest) -> dict:
        person = Person(body.person_id, body.name)
        assignment = self.coordinator.assign(person, body.origin, body.destination)
        if assignment.reason == AssignmentFailure.INVALID_REQUEST:
            raise HTTPException(status_code=400, detail=assignment.message)
        if assignment.reason == AssignmentFailure.NO_CAR_AVAILABLE:
            raise HTTPException(status_code=409, detail=assignment.message)
        return {"request": assignment.request.to_dict(), "message": assignment.message}

    async def dispatch(self) -> dict:
        events: List[dict] = [event_to_dict(event) for event in self.coordinator.dispatch_all()]
        await self.broadcast({"events": events})
        state = self.current_state()
        state["events"] = events
        return state

    def set_policy(self, name: str, options: Dict[str, object]) -> dict:
        self.coordinator.set_policy(get_policy(name, **options))
        return self.current_state()

    def set_maintenance(self, car_id: str, enabled: bool, reason: Optional[str]) -> dict:
        self.coordinator.set_maintenance(car_id, enabled)
        if reason:
            logger.info("car %s maintenance=%s: %s", car_id, enabled, reason)
        state = self.current_state()
        state["car_id"] = car_id
        state["maintenance"] = enabled
        state["reason"] = reason
        return state


manager = DispatchManager.from_environment()
app = FastAPI(title="Lift Dispatch API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/requests")
async def request_pickup(body: PickupRequest) -> dict:
    return manager.request_pickup(body)


@app.post("/dispatch")
async def dispatch() -> dict:
    return await manager.dispatch()


@app.post("/policy")
async def set_policy(selection: PolicySelection) -> dict:
    try:
        return manager.set_policy(selection.name, selection.options)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/cars/{car_id}/maintenance")
async def update_maintenance(car_id: str, update: MaintenanceUpdate) -> dict:
    try:
        return manager.set_maintenance(car_id, update.maintenance, update.reason)
    except UnknownCarError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@app.websocket("/ws/events")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
