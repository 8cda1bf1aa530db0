import pytest

from bookshop.database import Database
from bookshop.repositories.cart_repository import CartRepository
from bookshop.repositories.offer_repository import OfferRepository
from bookshop.repositories.order_repository import OrderRepository
from bookshop.repositories.product_repository import ProductRepository
from bookshop.repositories.user_repository import UserRepository


class BrokenCursorConnection:
    """A pooled connection that hands out no cursor, e.g. after the server went away."""

    def __init__(self):
        self.closed = False
        self.in_transaction = False

    def cursor(self, dictionary=False):
        raise ConnectionError("Lost connection to MySQL server during query")

    def start_transaction(self):
        self.in_transaction = True

    def commit(self):
        self.in_transaction = False

    def rollback(self):
        self.in_transaction = False

    def close(self):
        self.closed = True


class RecordingDatabase(Database):
    def __init__(self):
        super().__init__(config={"database": "unused"}, pool_size=1)
        self.connections = []

    def connect(self):
        return self

    def get_connection(self):
        conn = BrokenCursorConnection()
        self.connections.append(conn)
        return conn


@pytest.mark.parametrize("call", [
    lambda db: OrderRepository(db).get_order_by_id("ord_1"),
    lambda db: OrderRepository(db).get_all_orders(),
    lambda db: OrderRepository(db).create_order("user_1", "Colombo", 10.0, "Cash", "12 Galle Road",
                                                "Nimal", "0771234567", []),
    lambda db: OrderRepository(db).delete_order("ord_1"),
    lambda db: UserRepository(db).get_user_by_email("nimal@example.com"),
    lambda db: ProductRepository(db).get_all_products(),
    lambda db: CartRepository(db).get_cart_items("user_1"),
    lambda db: OfferRepository(db).get_all_offers(),
    lambda db: db.init_schema(),
])
def test_connection_is_returned_when_cursor_cannot_be_opened(call):
    db = RecordingDatabase()

    with pytest.raises(ConnectionError):
        call(db)

    assert db.connections
    assert all(conn.closed for conn in db.connections)
