from enum import Enum
from pydantic import BaseModel


class DocumentKind(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover_letter"


class DocumentBody(BaseModel):
    content: str


class DocumentResponse(BaseModel):
    application_id: str
    kind: DocumentKind
    content: str
