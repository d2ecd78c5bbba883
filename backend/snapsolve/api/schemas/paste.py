from pydantic import BaseModel


class PasteImageRequest(BaseModel):
    base64Image: str | None = None
