from pydantic import BaseModel


class CenterResponse(BaseModel):
    id: int
    name: str
    address: str

    class Config:
        from_attributes = True
