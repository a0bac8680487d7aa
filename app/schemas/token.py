# backEnd/app/schemas/token.py
from pydantic import BaseModel, ConfigDict

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    id_usuario: int
    nombre: str
    rol: str

class TokenData(BaseModel):
    username: str | None = None
    id_usuario: int | None = None


    model_config = ConfigDict(from_attributes=True)
