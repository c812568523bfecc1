from fastapi import Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.services.gateway import ContestRepository

def get_repository(db: Session = Depends(get_db)) -> ContestRepository:
    return ContestRepository(db)
