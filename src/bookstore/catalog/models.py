"""Models for catalog requests and responses."""

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class BookForm(BaseModel):
    """Fields an admin supplies when adding or replacing a book."""

    url: HttpUrl
    title: str = Field(min_length=2, max_length=100)
    author: str = Field(min_length=2)
    price: float = Field(ge=0)
    desc: str = Field(min_length=10)
    language: str = Field(min_length=1)

    def to_document(self) -> dict:
        """Return the fields in their stored form."""
        return {**self.model_dump(), "url": str(self.url)}


class Book(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    url: str
    title: str
    author: str
    price: float
    desc: str
    language: str
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class BookListResponse(BaseModel):
    status: str = "Success"
    data: list[Book]


class BookResponse(BaseModel):
    status: str = "Success"
    data: Book


class BookAddedResponse(BaseModel):
    message: str = "Book added successfully"
    book_id: str = Field(serialization_alias="bookId")
