from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.domain.errors import UserNotFound
from storefront.repos.user_repo import UserRepo
from storefront.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(
            id=payload.id,
            name=payload.name,
            email=payload.email,
            is_admin=payload.is_admin,
        )
        created = self.repo.add_user(user)
        self.repo.commit()
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        return UserRead.model_validate(user)

    def require_admin(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        if not user.is_admin:
            raise PermissionError("Admin access required")
        return user

    def is_admin(self, user_id: int) -> bool:
        user = self.repo.get_user(user_id)
        return bool(user and user.is_admin)
