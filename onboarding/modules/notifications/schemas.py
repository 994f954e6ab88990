from pydantic import BaseModel, EmailStr
from typing import Optional, List, Union, Dict, Any, Literal


class EmailNotificationRequest(BaseModel):
    to: Union[EmailStr, List[EmailStr]]
    subject: str
    html: Optional[str] = None
    type: Optional[Literal["verification_code", "generic"]] = None
    data: Optional[Dict[str, Any]] = None


class EmailNotificationResponse(BaseModel):
    id: str
