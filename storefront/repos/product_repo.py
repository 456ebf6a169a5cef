# storefront/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    """Dostep do katalogu: swiezy odczyt produktu i atomowe zdjecie ze stanu."""

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        # zawsze z bazy, nie z identity map sesji
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def decrement_stock(self, product_id: int, amount: int) -> bool:
        """Warunkowe zmniejszenie stanu w jednym UPDATE.

        UPDATE products SET stock = stock - :amount WHERE id = :id AND stock >= :amount
        0 rows affected -> brak towaru (albo produktu), stan nie schodzi ponizej zera.
        Nie commituje, dziala w transakcji wywolujacego.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= amount)
            .values(stock=ProductModel.stock - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
