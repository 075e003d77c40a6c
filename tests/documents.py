from datetime import datetime
from decimal import Decimal
from enum import Enum

from bson import Int64, ObjectId

from mongoable import ABSTRACT, BsonableDataclass, Document, SchemaConfig


class User(Document):
    name: str = SchemaConfig(required=True, max_length=50)
    age: int = SchemaConfig(default=0, minimum=0, maximum=150)


class Status(Enum):
    ACTIVE = 1
    SUSPENDED = 2


class Address(BsonableDataclass):
    street: str = SchemaConfig(required=True)
    zip_code: str | None = SchemaConfig(default=None, pattern=r"^[0-9]{5}$")


class Account(Document):
    __collection_name__ = "customer_accounts"

    email: str = SchemaConfig(required=True, min_length=3, pattern=r"@")
    status: Status = Status.ACTIVE
    tags: list[str] = SchemaConfig(default_factory=list)
    address: Address | None = None
    balance: Decimal = Decimal("0")
    visits: Int64 = Int64(0)
    last_login: datetime | None = None
    owner_id: ObjectId | None = None
    settings: dict = SchemaConfig(default_factory=dict)


class Auditable(Document):
    __collection_name__ = ABSTRACT

    created_by: str = ""


class Person(Auditable):
    name: str = SchemaConfig(required=True)


class PremiumAccount(Account):
    perks: list[str] = SchemaConfig(default_factory=list)


class Category(Document):
    label: str = SchemaConfig(required=True)
    children: list["Category"] = SchemaConfig(default_factory=list)


class Library(BsonableDataclass):
    books: list["Book"] = SchemaConfig(default_factory=list)


class Book(BsonableDataclass):
    title: str
