from typing import Generic, List, Optional, Type, TypeVar
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from qa_system.core.exceptions import StoreError
from qa_system.models.base import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)

class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get_by_id(self, db: Session, id: int) -> Optional[ModelType]:
        try:
            return db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    def list_by(self, db: Session, *criteria, order_by=None) -> List[ModelType]:
        try:
            query = db.query(self.model).filter(*criteria)
            if order_by is not None:
                query = query.order_by(order_by)
            return query.all()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
