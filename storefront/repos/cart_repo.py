# storefront/repos/cart_repo.py
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart_line import CartLineModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_line(self, user_id: int, product_id: int) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel)
            .where(
                CartLineModel.user_id == user_id,
                CartLineModel.product_id == product_id,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_lines(self, user_id: int) -> list[CartLineModel]:
        # najnowsze na gorze
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(CartLineModel.user_id == user_id)
                .order_by(CartLineModel.created_at.desc(), CartLineModel.id.desc())
                .execution_options(populate_existing=True)
            ).scalars().all()
        )

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def delete_line(self, line: CartLineModel) -> None:
        self.db.delete(line)
        self.db.flush()

    def clear(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(CartLineModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount