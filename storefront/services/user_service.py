from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.enums import UserRole
from storefront.domain.errors import NotFound
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.user_repo import UserRepo


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(id=payload.id, name=payload.name, role=UserRole.CUSTOMER.value)
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return UserRead.model_validate(user)
