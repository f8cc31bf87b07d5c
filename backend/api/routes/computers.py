"""
Computers API routes.

One route per (operation, key kind), mirroring the inventory's query surface.
Store errors are translated to HTTP status codes here and nowhere else.
"""
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel

from domain.errors import (
    AlreadyExistsError,
    InvalidKeyKindError,
    MalformedError,
    NotFoundError,
    NotificationError,
    StoreError,
    UnknownKeyKindError,
)
from domain.models import ASSIGNEE_CODE_LENGTH, Computer, KeyKind
from services.inventory import InventoryService

router = APIRouter()
logger = logging.getLogger(__name__)

KEY_ROUTES = (
    (KeyKind.MAC, "MAC", "mac"),
    (KeyKind.NAME, "Name", "name"),
    (KeyKind.IP, "IP", "ip"),
)


class ComputerBody(BaseModel):
    mac: str = ""
    name: str = ""
    ip: str = ""
    assignee: str = ""
    description: str = ""


class AssignmentBody(BaseModel):
    key: str = ""
    assignee: str = ""


def computer_to_response(computer: Computer) -> ComputerBody:
    """Convert domain Computer to API response."""
    return ComputerBody(**computer.to_dict())


def get_inventory(request: Request) -> InventoryService:
    return request.app.state.inventory


def raise_store_error(exc: StoreError, not_found_detail: str = "Key not found") -> NoReturn:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=404, detail=not_found_detail)
    if isinstance(exc, (MalformedError, InvalidKeyKindError, UnknownKeyKindError)):
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, AlreadyExistsError):
        raise HTTPException(status_code=409, detail=str(exc))
    raise HTTPException(status_code=500, detail=str(exc))


def _over_assignment_failed(exc: NotificationError) -> NoReturn:
    logger.error("Error reporting over-assignment: %s", exc)
    raise HTTPException(status_code=500, detail="Error reporting over-assignment")


@router.post("/addComputer", status_code=201)
def add_computer(data: ComputerBody, inventory: InventoryService = Depends(get_inventory)):
    """Add a computer; mac, name and ip are mandatory."""
    try:
        inventory.add(Computer(**data.model_dump()))
    except StoreError as exc:
        raise_store_error(exc)
    except NotificationError as exc:
        _over_assignment_failed(exc)
    return Response(status_code=201)


@router.get("/getComputers", response_model=List[ComputerBody])
def list_computers(inventory: InventoryService = Depends(get_inventory)):
    try:
        computers = inventory.read_all(KeyKind.ALL)
    except StoreError as exc:
        raise_store_error(exc, "No items found")
    return [computer_to_response(c) for c in computers]


@router.get("/getUnassignedComputers", response_model=List[ComputerBody])
def list_unassigned_computers(inventory: InventoryService = Depends(get_inventory)):
    try:
        computers = inventory.read_all(KeyKind.NOT_ASSIGNED)
    except StoreError as exc:
        raise_store_error(exc, "No unassigned items")
    return [computer_to_response(c) for c in computers]


@router.get("/getComputersByAssignee", response_model=List[ComputerBody])
def list_computers_by_assignee(
    assignee: str = "", inventory: InventoryService = Depends(get_inventory)
):
    try:
        computers = inventory.read_all(KeyKind.ASSIGNEE, assignee)
    except StoreError as exc:
        raise_store_error(exc)
    return [computer_to_response(c) for c in computers]


def _make_get_route(kind: KeyKind, param: str):
    def get_computer(
        value: str = Query("", alias=param),
        inventory: InventoryService = Depends(get_inventory),
    ):
        try:
            computer = inventory.read(kind, value)
        except StoreError as exc:
            raise_store_error(exc)
        return computer_to_response(computer)

    return get_computer


def _make_assign_route(kind: KeyKind):
    def assign_computer(
        data: AssignmentBody, inventory: InventoryService = Depends(get_inventory)
    ):
        if not data.key:
            raise HTTPException(status_code=400, detail="Missing mandatory property 'key'.")
        if not data.assignee:
            raise HTTPException(status_code=400, detail="Missing mandatory property 'assignee'.")
        if len(data.assignee) != ASSIGNEE_CODE_LENGTH:
            raise HTTPException(
                status_code=400,
                detail="'assignee' field is restricted to 3-letter employee codes.",
            )
        try:
            inventory.assign(kind, data.key, data.assignee)
        except StoreError as exc:
            raise_store_error(exc, "Error items not found")
        except NotificationError as exc:
            _over_assignment_failed(exc)
        return Response(status_code=200)

    return assign_computer


def _make_unassign_route(kind: KeyKind, param: str):
    def unassign_computer(
        value: str = Query("", alias=param),
        inventory: InventoryService = Depends(get_inventory),
    ):
        try:
            inventory.unassign(kind, value)
        except StoreError as exc:
            raise_store_error(exc)
        return Response(status_code=200)

    return unassign_computer


def _make_delete_route(kind: KeyKind, param: str):
    def delete_computer(
        value: str = Query("", alias=param),
        inventory: InventoryService = Depends(get_inventory),
    ):
        try:
            inventory.delete(kind, value)
        except StoreError as exc:
            raise_store_error(exc)
        return Response(status_code=200)

    return delete_computer


for _kind, _suffix, _param in KEY_ROUTES:
    router.add_api_route(
        f"/getComputerBy{_suffix}",
        _make_get_route(_kind, _param),
        methods=["GET"],
        response_model=ComputerBody,
        name=f"get_computer_by_{_param}",
    )
    router.add_api_route(
        f"/assignComputerBy{_suffix}",
        _make_assign_route(_kind),
        methods=["PUT"],
        name=f"assign_computer_by_{_param}",
    )
    router.add_api_route(
        f"/unassignComputerBy{_suffix}",
        _make_unassign_route(_kind, _param),
        methods=["DELETE"],
        name=f"unassign_computer_by_{_param}",
    )
    router.add_api_route(
        f"/deleteComputerBy{_suffix}",
        _make_delete_route(_kind, _param),
        methods=["DELETE"],
        name=f"delete_computer_by_{_param}",
    )
