import logging
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from sqlalchemy.orm import Session

from config import get_settings
from database import SessionLocal
from errors import FormatError, NotFoundError, PersistenceError
from owners import read_owner_token
from scheduler import SchedulerManager
from schemas import (
    CategoryIn,
    CategoryOut,
    DateRangeOut,
    DayOut,
    DaysPageOut,
    ExpenseIn,
    ExpenseOut,
    YearRangeIn,
)
from services import CategoryService, ExpenseService

app = FastAPI(title="Expense Ledger")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_owner_id(x_owner_token: Optional[str] = Header(default=None)) -> str:
    if not x_owner_token:
        raise HTTPException(status_code=401, detail="Missing owner token")
    owner_id = read_owner_token(x_owner_token)
    if not owner_id:
        raise HTTPException(status_code=401, detail="Invalid owner token")
    return owner_id


scheduler_manager = SchedulerManager()


@app.on_event("startup")
def startup_event():
    scheduler_manager.start()


@app.on_event("shutdown")
def shutdown_event():
    scheduler_manager.stop()


@app.get("/api/categories", response_model=list[CategoryOut])
def api_list_categories(
    db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)
):
    return CategoryService(db, owner_id).list_all()


@app.post("/api/categories", response_model=CategoryOut)
def api_create_category(
    data: CategoryIn,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    try:
        category = CategoryService(db, owner_id).create(data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logging.info(f"category_created: category_id={category.id} owner={owner_id}")
    return category


@app.post("/api/categories/{category_id}", response_model=CategoryOut)
def api_update_category(
    category_id: str,
    data: CategoryIn,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    try:
        return CategoryService(db, owner_id).update(category_id, data)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.delete("/api/categories/{category_id}", response_model=CategoryOut)
def api_delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    try:
        category = CategoryService(db, owner_id).delete(category_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logging.info(f"category_deleted: category_id={category_id} owner={owner_id}")
    return category


@app.post("/api/expenses", response_model=ExpenseOut)
def api_create_expense(
    data: ExpenseIn,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    try:
        expense = ExpenseService(db, owner_id).create(data)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PersistenceError as exc:
        logging.exception("Error creating expense")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except (FormatError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logging.info(
        f"expense_created: expense_id={expense.id} day_id={expense.day_id} "
        f"owner={owner_id}"
    )
    return expense


@app.delete("/api/expenses/{expense_id}", response_model=ExpenseOut)
def api_delete_expense(
    expense_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    try:
        expense = ExpenseService(db, owner_id).delete(expense_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    logging.info(f"expense_deleted: expense_id={expense_id} owner={owner_id}")
    return expense


@app.post("/api/expenses/range", response_model=DateRangeOut)
def api_expenses_over_year_range(
    data: YearRangeIn,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    days, categories = ExpenseService(db, owner_id).over_year_range(
        data.from_year, data.to_year
    )
    return DateRangeOut(
        days=[DayOut.model_validate(d) for d in days],
        categories=[CategoryOut.model_validate(c) for c in categories],
    )


@app.get("/api/days", response_model=DaysPageOut)
def api_days(
    page: int = Query(default=0, ge=0),
    page_size: Optional[int] = Query(default=None, ge=1, le=100),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    limit = page_size or get_settings().page_size
    items = ExpenseService(db, owner_id).days_page(page * limit, limit + 1)
    has_more = len(items) > limit
    items = items[:limit]
    return DaysPageOut(
        items=[DayOut.model_validate(d) for d in items],
        page=page,
        page_size=limit,
        has_more=has_more,
    )
