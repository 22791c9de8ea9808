from fastapi import Depends, Request

from services.record_store import RecordStore
from services.workflow import AuditWorkflow


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_workflow(store: RecordStore = Depends(get_store)) -> AuditWorkflow:
    return AuditWorkflow(store)
