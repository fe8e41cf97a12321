"""Pydantic request / response models for the HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..model import Task, TaskStatus


class CreateTaskRequest(BaseModel):
    # title stays optional here so a missing title gets the same
    # "Title is required" error as an empty one
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None


class TaskOut(BaseModel):
    id: str
    title: str
    description: str
    status: TaskStatus
    createdAt: str
    updatedAt: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskOut":
        return cls(**task.to_dict())


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class ServiceInfo(BaseModel):
    name: str
    version: str
    status: str
