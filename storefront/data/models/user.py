from sqlalchemy import Column, Integer, String

from storefront.data.database import Base
from storefront.domain.enums import UserRole


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String(16), nullable=False, default=UserRole.CUSTOMER.value)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
