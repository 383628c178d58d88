from typing import List, Optional
from pydantic import BaseModel


class TemplateItem(BaseModel):
    id: str
    name: str
    default_image_url: Optional[str] = None


class BoardTemplate(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str = ""
    items: List[TemplateItem]
    is_active: bool = True
