# academy/crud/user.py
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.crud.base import CRUDBase
from academy.core.security_password import hash_password
from academy.models.user import User
from academy.schemas.user import UserCreate, UserUpdate


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.scalar(select(User).where(User.email == normalize_email(email)))

    def create(self, db: Session, obj_in: UserCreate, extra=None) -> User:
        data = obj_in.model_dump(exclude={"password"})
        data["email"] = normalize_email(data["email"])
        data["hashed_password"] = hash_password(obj_in.password)
        if extra: data.update(extra)
        user = User(**data)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def update(self, db: Session, db_obj: User, obj_in) -> User:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        password = data.pop("password", None)
        if password:
            data["hashed_password"] = hash_password(password)
        return super().update(db, db_obj, data)


user_crud = CRUDUser(User, "User")
