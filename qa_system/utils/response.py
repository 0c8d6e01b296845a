from typing import Any, Optional, Dict
from fastapi import HTTPException
from pydantic import BaseModel
from bson import ObjectId
from qa_system.core.exceptions import NotFoundError, QASystemError, StoreError, ValidationError

class APIResponse(BaseModel):
    success: bool = True
    message: str = "Success"
    data: Optional[Any] = None
    error: Optional[Dict[str, Any]] = None

def convert_objectid(obj):
    if isinstance(obj, ObjectId):
        return str(obj)
    elif isinstance(obj, BaseModel):
        return convert_objectid(obj.model_dump())
    elif isinstance(obj, list):
        return [convert_objectid(item) for item in obj]
    elif isinstance(obj, dict):
        return {k: convert_objectid(v) for k, v in obj.items()}
    else:
        return obj

def success_response(data: Any = None, message: str = "Success") -> APIResponse:
    return APIResponse(success=True, message=message, data=convert_objectid(data))

def http_error(e: QASystemError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, StoreError):
        return HTTPException(status_code=500, detail=f"Storage error: {e}")
    return HTTPException(status_code=500, detail=str(e))
