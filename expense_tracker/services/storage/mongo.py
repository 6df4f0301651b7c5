"""
MongoDB Storage Implementation

Users and expenses live in two collections of one database. Documents keep
the shape the HTTP API returns:

    users:    {_id, username, password}
    expenses: {_id, title, amount, date, category, userId}

Usernames are unique through a unique index created on first use.
The owning-user reference is stored as given and is not checked against
the users collection.
"""

from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    PyMongoError,
    ServerSelectionTimeoutError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.config import MongoSettings
from expense_tracker.logs import get_logger
from expense_tracker.models.expense import MUTABLE_FIELDS, Expense
from expense_tracker.models.user import User
from expense_tracker.services.storage.interface import (
    DuplicateError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
    StoreUnavailableError,
    UserStorageInterface,
)


logger = get_logger(__name__)


def _to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a document id; None when the string is not a valid ObjectId."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _storage_error(action: str, e: PyMongoError) -> StorageError:
    if isinstance(e, (ConnectionFailure, ServerSelectionTimeoutError)):
        return StoreUnavailableError(f"Failed to {action}: {e}")
    return StorageError(f"Failed to {action}: {e}")


class MongoStoreClient:
    """
    Low-level MongoDB client wrapper.

    Owns the driver client (and with it the connection pool) and hands out
    collections. One instance is shared by both storage classes.
    """

    def __init__(
        self,
        settings: MongoSettings,
        client: Optional[MongoClient] = None,
    ):
        self._settings = settings
        self._client = client
        self._indexes_ready = False

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(
                self._settings.uri,
                serverSelectionTimeoutMS=self._settings.server_selection_timeout_ms,
                tz_aware=True,
            )
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(StoreUnavailableError),
        reraise=True,
    )
    def connect(self) -> None:
        """
        Verify the server is reachable and prepare indexes.

        Only called at startup.
        """
        self.ping()
        self.ensure_indexes()
        logger.info(
            "store_connected",
            database=self._settings.database,
        )

    def ping(self) -> None:
        try:
            self.client.admin.command("ping")
        except PyMongoError as e:
            raise StoreUnavailableError(f"MongoDB is unreachable: {e}")

    def ensure_indexes(self) -> None:
        if self._indexes_ready:
            return
        try:
            self.users.create_index(
                [("username", ASCENDING)],
                unique=True,
                name="username_unique",
            )
            self.expenses.create_index(
                [("userId", ASCENDING)],
                name="userId",
            )
        except PyMongoError as e:
            raise _storage_error("create indexes", e)
        self._indexes_ready = True

    @property
    def database(self):
        return self.client[self._settings.database]

    @property
    def users(self) -> Collection:
        return self.database[self._settings.users_collection]

    @property
    def expenses(self) -> Collection:
        return self.database[self._settings.expenses_collection]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


class MongoUserStorage(UserStorageInterface):
    """MongoDB implementation of user storage."""

    def __init__(self, client: MongoStoreClient):
        self._client = client

    def _doc_to_user(self, doc: dict) -> User:
        return User(
            id=str(doc["_id"]),
            username=doc["username"],
            password_hash=doc["password"],
        )

    async def create_user(self, username: str, password_hash: str) -> User:
        """Insert a user; the unique index rejects taken usernames."""
        self._client.ensure_indexes()
        doc = {"username": username, "password": password_hash}
        try:
            result = self._client.users.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateError(f"Username already exists: {username}")
        except PyMongoError as e:
            raise _storage_error("save user", e)
        doc["_id"] = result.inserted_id
        return self._doc_to_user(doc)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        try:
            doc = self._client.users.find_one({"username": username})
        except PyMongoError as e:
            raise _storage_error("get user", e)
        return self._doc_to_user(doc) if doc else None


class MongoExpenseStorage(ExpenseStorageInterface):
    """
    MongoDB implementation of expense storage.

    Ids that are not valid ObjectIds can never match a document, so they
    are reported as not found without a round trip.

    Owner ids are written as strings. Documents from earlier clients hold
    the owner as an ObjectId, so owner filters match both forms.
    """

    def __init__(self, client: MongoStoreClient):
        self._client = client

    def _doc_to_expense(self, doc: dict) -> Expense:
        # Stored records are loaded as-is; input limits apply on the way in.
        return Expense.model_construct(
            id=str(doc["_id"]),
            title=doc.get("title"),
            amount=doc.get("amount"),
            date=doc.get("date"),
            category=doc.get("category"),
            user_id=str(doc.get("userId")),
        )

    def _owner_filter(self, user_id: str):
        oid = _to_object_id(user_id)
        if oid is None:
            return user_id
        return {"$in": [user_id, oid]}

    def _match(self, expense_id: str, user_id: Optional[str]) -> dict:
        oid = _to_object_id(expense_id)
        if oid is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        query = {"_id": oid}
        if user_id is not None:
            query["userId"] = self._owner_filter(user_id)
        return query

    async def create_expense(self, expense: Expense) -> Expense:
        doc = expense.model_dump(by_alias=True, exclude={"id"})
        try:
            result = self._client.expenses.insert_one(doc)
        except PyMongoError as e:
            raise _storage_error("save expense", e)
        doc["_id"] = result.inserted_id
        return self._doc_to_expense(doc)

    async def list_expenses(self, user_id: str) -> list[Expense]:
        query = {"userId": self._owner_filter(user_id)}
        try:
            docs = list(self._client.expenses.find(query))
        except PyMongoError as e:
            raise _storage_error("list expenses", e)
        return [self._doc_to_expense(doc) for doc in docs]

    async def update_expense(
        self,
        expense_id: str,
        fields: dict,
        user_id: Optional[str] = None,
    ) -> Expense:
        query = self._match(expense_id, user_id)
        changes = {k: v for k, v in fields.items() if k in MUTABLE_FIELDS}
        try:
            doc = self._client.expenses.find_one_and_update(
                query,
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise _storage_error("update expense", e)
        if doc is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        return self._doc_to_expense(doc)

    async def delete_expense(
        self,
        expense_id: str,
        user_id: Optional[str] = None,
    ) -> Expense:
        query = self._match(expense_id, user_id)
        try:
            doc = self._client.expenses.find_one_and_delete(query)
        except PyMongoError as e:
            raise _storage_error("delete expense", e)
        if doc is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        return self._doc_to_expense(doc)

    async def ping(self) -> None:
        self._client.ping()
