# /peer-review-backend/peer_review/db/base_class.py

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """
    Declarative base for every ORM model.

    Table names default to the pluralized, lower-cased class name
    (`Task` -> `tasks`); models override `__tablename__` where that reads badly.
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"
