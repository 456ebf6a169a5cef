import os

# przed importem storefront - settings czytaja env przy imporcie
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient

from storefront.api.deps import get_lock_service
from storefront.data.database import get_db, init_db, make_engine, make_session_factory
from storefront.data.models import CartLineModel, OrderModel, ProductModel, UserModel
from storefront.domain.enums import UserRole
from storefront.main import create_app
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService

CUSTOMER_ID = 1
OTHER_CUSTOMER_ID = 2
ADMIN_ID = 99


class RecordingNotifier(NotificationService):
    def __init__(self):
        self.sent = []

    def _dispatch(self, user_id, order_id, event, payload):
        self.sent.append((user_id, order_id, event, payload))


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = make_session_factory(engine)
    with factory() as s:
        s.add_all(
            [
                UserModel(id=CUSTOMER_ID, name="Alice", role=UserRole.CUSTOMER.value),
                UserModel(id=OTHER_CUSTOMER_ID, name="Bob", role=UserRole.CUSTOMER.value),
                UserModel(id=ADMIN_ID, name="Admin", role=UserRole.ADMIN.value),
            ]
        )
        s.commit()
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def lock_service(redis_client):
    return LockService(client=redis_client, ttl=5, wait=0.2)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_product(session_factory):
    def _make(price="10.00", sale_price=None, stock=10, name="Widget", image=None, brand=None):
        with session_factory() as s:
            product = ProductModel(
                name=name,
                brand=brand,
                image=image,
                price=Decimal(price),
                sale_price=Decimal(sale_price) if sale_price is not None else None,
                stock=stock,
            )
            s.add(product)
            s.commit()
            return product.id

    return _make


@pytest.fixture
def stock_of(session_factory):
    def _stock(product_id):
        with session_factory() as s:
            return s.get(ProductModel, product_id).stock

    return _stock


@pytest.fixture
def count_orders(session_factory):
    def _count():
        with session_factory() as s:
            return s.query(OrderModel).count()

    return _count


@pytest.fixture
def cart_quantities(session_factory):
    def _quantities(user_id):
        with session_factory() as s:
            lines = s.query(CartLineModel).filter(CartLineModel.user_id == user_id).all()
            return {line.product_id: line.quantity for line in lines}

    return _quantities


@pytest.fixture
def client(session_factory, lock_service):
    app = create_app(with_lifespan=False)

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    return TestClient(app)
