from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenPayload(BaseModel):
    user_id: int
    username: str


class UserOut(BaseModel):
    id: int
    username: str


class UserResponse(BaseModel):
    user: UserOut


class SuccessResponse(BaseModel):
    success: bool = True
