# sample/adapters/api/routers/todo_items.py
from typing import List

from fastapi import APIRouter, Depends, Response, status

from sample.adapters.api.dependencies import get_todo_item_service
from sample.adapters.api.schemas import TodoItemCreate, TodoItemRead, TodoItemUpdate
from sample.core.use_cases.todo_items import TodoItemService

router = APIRouter(prefix="/todo-items", tags=["Todo Items"])


@router.get("/", response_model=List[TodoItemRead])
async def list_todo_items(service: TodoItemService = Depends(get_todo_item_service)):
    return await service.list_items()


@router.get("/{item_id}", response_model=TodoItemRead)
async def get_todo_item(item_id: int, service: TodoItemService = Depends(get_todo_item_service)):
    return await service.get_item(item_id)


@router.post("/", response_model=TodoItemRead, status_code=status.HTTP_201_CREATED)
async def create_todo_item(
    payload: TodoItemCreate,
    service: TodoItemService = Depends(get_todo_item_service),
):
    """
    Creates a TodoItem.
    A duplicate title is rejected with 409 by the global error boundary.
    """
    return await service.create_item(payload.title, is_done=payload.is_done)


@router.patch("/{item_id}", response_model=TodoItemRead)
async def update_todo_item(
    item_id: int,
    payload: TodoItemUpdate,
    service: TodoItemService = Depends(get_todo_item_service),
):
    return await service.update_item(item_id, title=payload.title, is_done=payload.is_done)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo_item(item_id: int, service: TodoItemService = Depends(get_todo_item_service)):
    await service.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
