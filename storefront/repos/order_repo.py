# storefront/repos/order_repo.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zamowienie zapisuje sie razem z reszta transakcji
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, offset: int, limit: int, status: str | None = None) -> list[OrderModel]:
        stmt = select(OrderModel)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc()).offset(offset).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_orders(self, status: str | None = None) -> int:
        stmt = select(func.count(OrderModel.id))
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return self.db.execute(stmt).scalar_one()

    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )
