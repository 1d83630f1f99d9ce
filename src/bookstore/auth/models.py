"""Models for account requests and responses."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from bookstore.common import Role


class SignUpRequest(BaseModel):
    """Registration form. Unknown fields, including ``role``, are ignored."""

    username: str = Field(min_length=4)
    email: EmailStr
    password: str = Field(min_length=1)
    address: str = Field(min_length=1)
    avatar: str | None = None


class SignInRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AddressUpdate(BaseModel):
    address: str = Field(min_length=1)


class InsertedId(BaseModel):
    inserted_id: str = Field(serialization_alias="insertedId")


class SignUpResponse(BaseModel):
    success: bool = True
    data: InsertedId


class SignInResponse(BaseModel):
    """Credentials accepted; ``token`` is the bearer token for later calls."""

    success: bool = True
    id: str
    role: Role
    token: str


class UserProfile(BaseModel):
    """Public view of an account, never including the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str
    email: str
    address: str
    avatar: str
    role: Role
    favourites: list[str] = []
    cart: list[str] = []
    orders: list[str] = []
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class UserProfileResponse(BaseModel):
    success: bool = True
    data: UserProfile


class MessageResponse(BaseModel):
    success: bool = True
    message: str
