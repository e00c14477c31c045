"""Books — a form-driven JSON resource.

One dataclass schema, one handler. The handler implements every
capability, so the app exposes list, get, create, update and delete
under ``/books``. Writes take form fields (``title``, ``author``,
``pages``, ``in_print``); reads return JSON.

Run:
    cd examples/books && python app.py

Try:
    curl localhost:8000/books
    curl -d title=Solaris -d author=Lem -d pages=204 localhost:8000/books
    curl -X DELETE localhost:8000/books/1
"""

import threading
from dataclasses import dataclass, field, replace

from reason import App, AppConfig, ResourceNotFound, Unsigned


@dataclass(frozen=True, slots=True)
class Book:
    id: int = 0
    title: str = ""
    author: str = ""
    pages: Unsigned = Unsigned(0)
    in_print: bool = field(default=False, metadata={"json": "in_print,omitempty"})


# ---------------------------------------------------------------------------
# In-memory storage (thread-safe for free-threading)
# ---------------------------------------------------------------------------


class BookStore:
    def __init__(self) -> None:
        self._books: dict[int, Book] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def path(self) -> str:
        return "books"

    def get_resource(self, resource_id: str) -> Book:
        try:
            key = int(resource_id)
        except ValueError:
            raise ResourceNotFound(resource_id) from None
        with self._lock:
            book = self._books.get(key)
        if book is None:
            raise ResourceNotFound(resource_id)
        return book

    def list_resource(self) -> list[Book]:
        with self._lock:
            return sorted(self._books.values(), key=lambda b: b.id)

    def create_resource(self, resource: Book) -> Book:
        with self._lock:
            book = replace(resource, id=self._next_id)
            self._books[book.id] = book
            self._next_id += 1
        return book

    def update_resource(self, resource: Book, data: Book) -> Book:
        # Blank form fields decode to zero values; keep what was there
        updated = replace(
            resource,
            title=data.title or resource.title,
            author=data.author or resource.author,
            pages=data.pages or resource.pages,
            in_print=data.in_print,
        )
        with self._lock:
            self._books[updated.id] = updated
        return updated

    def delete_resource(self, resource: Book) -> None:
        with self._lock:
            self._books.pop(resource.id, None)


store = BookStore()
store.create_resource(Book(title="Dune", author="Frank Herbert", pages=Unsigned(412), in_print=True))
store.create_resource(Book(title="Roadside Picnic", author="Strugatsky", pages=Unsigned(145)))

app = App(AppConfig(debug=True))
app.add(Book, store)


if __name__ == "__main__":
    app.run()
