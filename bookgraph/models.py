# bookgraph/models.py
from pydantic import BaseModel


DELETE_MESSAGE = "Book deleted successfully"


class Book(BaseModel):
    id: str
    title: str
    release_year: int
    author_id: str


class Author(BaseModel):
    id: str
    name: str


class DeleteResult(BaseModel):
    message: str = DELETE_MESSAGE
