"""
Database manager for the rollup engine: jobs, time entries, financial rows,
labor pricing, material sheets and subcontractor estimates.
Supports local SQLite (default) or any SQLAlchemy URL via DATABASE_URL.

Reads hand immutable records to the engine; every report method re-reads the
raw rows and recomputes from scratch. The acting user id and role are passed
in explicitly when the manager is created.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from aggregation import TimeSummary, only_clock_in, summarize_time
from config import Settings, get_settings
from durations import entry_man_hours, hours_between, resolve_crew
from errors import PermissionDeniedError, PersistenceError, ValidationError
from models import (
    Base,
    Component,
    FinancialRow,
    Job,
    LaborPricing,
    MaterialItem,
    MaterialSheet,
    MaterialSheetLabor,
    MaterialWorkbook,
    ROLE_CREW,
    ROLE_OFFICE,
    ROLES,
    SubcontractorEstimate,
    TimeEntry,
    User,
)
from ordering import insert_after, needs_renumbering, next_order_index, renumber, sort_rows, swap_order
from progress import BudgetProgress, budget_progress
from records import (
    ComponentRecord,
    FinancialRowRecord,
    LaborPricingRecord,
    MaterialItemRecord,
    MaterialSheetLaborRecord,
    MaterialSheetRecord,
    SubcontractorEstimateRecord,
    TimeEntryRecord,
    edit_financial_row,
    new_financial_row,
    recrew_entry,
    retime_entry,
    set_entry_hours,
)
from rollup import CostBreakdown, Proposal, build_proposal, cost_breakdown

logger = logging.getLogger(__name__)

_UNSET = object()


def _entry_record(e: TimeEntry) -> TimeEntryRecord:
    return TimeEntryRecord(
        id=e.id,
        job_id=e.job_id,
        component_id=e.component_id,
        user_id=e.user_id,
        start_time=e.start_time,
        end_time=e.end_time,
        total_hours=e.total_hours or 0.0,
        crew_count=e.crew_count or 1,
        worker_names=tuple(e.worker_names or ()),
        is_manual=bool(e.is_manual),
        notes=e.notes or "",
    )


def _row_record(r: FinancialRow) -> FinancialRowRecord:
    return FinancialRowRecord(
        id=r.id,
        job_id=r.job_id,
        category=r.category,
        description=r.description or "",
        quantity=r.quantity,
        unit_cost=r.unit_cost,
        markup_percent=r.markup_percent or 0.0,
        total_cost=r.total_cost or 0.0,
        selling_price=r.selling_price or 0.0,
        order_index=r.order_index,
        notes=r.notes or "",
    )


def _estimate_record(s: SubcontractorEstimate) -> SubcontractorEstimateRecord:
    return SubcontractorEstimateRecord(
        id=s.id,
        job_id=s.job_id,
        company_name=s.company_name,
        total_amount=s.total_amount or 0.0,
        markup_percent=s.markup_percent or 0.0,
        order_index=s.order_index,
    )


def _sheet_labor_record(labor: MaterialSheetLabor) -> MaterialSheetLaborRecord:
    return MaterialSheetLaborRecord(
        id=labor.id,
        sheet_id=labor.sheet_id,
        description=labor.description or "",
        estimated_hours=labor.estimated_hours or 0.0,
        hourly_rate=labor.hourly_rate or 0.0,
        notes=labor.notes or "",
    )


def _apply_row(row: FinancialRow, record: FinancialRowRecord) -> None:
    row.category = record.category
    row.description = record.description
    row.quantity = record.quantity
    row.unit_cost = record.unit_cost
    row.markup_percent = record.markup_percent
    row.total_cost = record.total_cost
    row.selling_price = record.selling_price
    row.notes = record.notes


class DatabaseManager:
    """Database as an object: owns engine and sessions, exposes operations as methods."""

    def __init__(
        self,
        db_path: Path | str | None = None,
        database_url: str | None = None,
        current_user_id: int | None = None,
        current_role: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._current_user_id = current_user_id
        self._current_role = current_role
        url = database_url or (f"sqlite:///{db_path}" if db_path else self._settings.sqlalchemy_url)
        self._engine = create_engine(url, echo=self._settings.db_echo)
        self._session_factory = sessionmaker(
            bind=self._engine, autocommit=False, autoflush=False
        )

    @property
    def current_user_id(self) -> int | None:
        """Current user id for this manager (read-only)."""
        return self._current_user_id

    @property
    def current_role(self) -> str | None:
        return self._current_role

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        """Yield a new session (context manager)."""
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def _validating(self, action: str):
        """Log validation rejections before they reach the caller."""
        try:
            yield
        except ValidationError as exc:
            logger.warning("%s rejected: %s", action, exc)
            raise

    def _commit(self, session: Session, action: str) -> None:
        """Commit or roll back; store failures surface as PersistenceError."""
        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("%s failed", action)
            raise PersistenceError(f"{action} failed: {exc}") from exc
        logger.info("%s", action)

    def _require_user(self) -> None:
        """Raise if current_user_id is not set (required to record time)."""
        if self._current_user_id is None:
            raise ValueError("Current user is not set.")

    def _require_office(self) -> None:
        if self._current_role != ROLE_OFFICE:
            raise PermissionDeniedError("Only the office role can change financial rows.")

    def _tz(self, tz: tzinfo | None) -> tzinfo | None:
        return tz if tz is not None else self._settings.tz()

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        Base.metadata.create_all(self._engine)

    # --- Jobs, users, components ---

    def add_job(self, name: str, estimated_hours: float | None = None) -> Job:
        if not name or not name.strip():
            raise ValidationError("Job name is required.")
        with self._session() as session:
            job = Job(name=name.strip(), estimated_hours=estimated_hours)
            session.add(job)
            self._commit(session, f"Create job {name!r}")
            session.refresh(job)
            return job

    def get_job(self, job_id: int) -> Job:
        with self._session() as session:
            job = session.get(Job, job_id)
            if job is None:
                raise ValueError("Job not found.")
            return job

    def set_estimated_hours(self, job_id: int, estimated_hours: float | None) -> None:
        if estimated_hours is not None and estimated_hours < 0:
            raise ValidationError("Estimated hours must be non-negative.")
        with self._session() as session:
            job = session.get(Job, job_id)
            if job is None:
                raise ValueError("Job not found.")
            job.estimated_hours = estimated_hours
            self._commit(session, f"Set estimated hours on job {job_id}")

    def add_user(self, username: str, role: str = ROLE_CREW) -> User:
        if role not in ROLES:
            raise ValidationError(f"Unknown role: {role!r}.")
        with self._session() as session:
            user = User(username=username, role=role)
            session.add(user)
            self._commit(session, f"Create user {username!r}")
            session.refresh(user)
            return user

    def get_user_names(self) -> dict[int, str]:
        with self._session() as session:
            return {u.id: u.username for u in session.query(User).all()}

    def add_component(
        self, job_id: int, name: str, *, is_active: bool = True, is_task: bool = False
    ) -> ComponentRecord:
        with self._session() as session:
            if session.get(Job, job_id) is None:
                raise ValueError("Job not found.")
            component = Component(job_id=job_id, name=name, is_active=is_active, is_task=is_task)
            session.add(component)
            self._commit(session, f"Create component {name!r} on job {job_id}")
            session.refresh(component)
            return ComponentRecord(component.id, job_id, component.name, component.is_active, component.is_task)

    def delete_component(self, component_id: int) -> bool:
        """Delete a component, or deactivate it when time is logged against it.

        Returns True when the row was removed. Deactivated components keep
        their name in the rollups and drop out of active_only listings.
        """
        with self._session() as session:
            component = session.get(Component, component_id)
            if component is None:
                raise ValueError("Component not found.")
            in_use = (
                session.query(TimeEntry.id).filter(TimeEntry.component_id == component_id).first()
                is not None
            )
            if in_use:
                component.is_active = False
                self._commit(session, f"Deactivate component {component_id}")
                return False
            session.delete(component)
            self._commit(session, f"Delete component {component_id}")
            return True

    def get_components(self, job_id: int, *, active_only: bool = False) -> list[ComponentRecord]:
        with self._session() as session:
            q = session.query(Component).filter(Component.job_id == job_id)
            if active_only:
                q = q.filter(Component.is_active == True)
            return [
                ComponentRecord(c.id, c.job_id, c.name, bool(c.is_active), bool(c.is_task))
                for c in q.order_by(Component.name).all()
            ]

    def get_component_names(self, job_id: int) -> dict[int, str]:
        return {c.id: c.name for c in self.get_components(job_id)}

    # --- Time entries ---

    def add_time_entry(
        self,
        job_id: int,
        *,
        start_time: datetime,
        end_time: datetime | None = None,
        total_hours: float | None = None,
        component_id: int | None = None,
        crew_count: int | None = None,
        worker_names: list[str] | None = None,
        select_workers: bool = False,
        notes: str = "",
    ) -> TimeEntryRecord:
        """Record time for the current user.

        Without total_hours the duration comes from the timestamps (rounded to
        the quarter hour); a typed total_hours marks the entry as manual.
        """
        self._require_user()
        with self._validating("Add time entry"):
            if total_hours is None:
                hours = hours_between(start_time, end_time)
                is_manual = False
            else:
                if total_hours < 0:
                    raise ValidationError("Duration must be non-negative.")
                if end_time is not None and end_time <= start_time:
                    raise ValidationError("End time must be after start time.")
                hours = float(total_hours)
                is_manual = True
            count, names = resolve_crew(crew_count, worker_names, select_workers=select_workers)
        with self._session() as session:
            if session.get(Job, job_id) is None:
                raise ValueError("Job not found.")
            entry = TimeEntry(
                job_id=job_id,
                component_id=component_id,
                user_id=self._current_user_id,
                start_time=start_time,
                end_time=end_time,
                total_hours=hours,
                crew_count=count,
                worker_names=names or None,
                is_manual=is_manual,
                notes=notes or "",
            )
            session.add(entry)
            self._commit(session, f"Add time entry on job {job_id}")
            session.refresh(entry)
            return _entry_record(entry)

    def get_time_entries(self, job_id: int, *, clock_in_only: bool = False) -> list[TimeEntryRecord]:
        """Time entries of a job, newest first."""
        with self._session() as session:
            q = session.query(TimeEntry).filter(TimeEntry.job_id == job_id)
            if clock_in_only:
                q = q.filter(TimeEntry.component_id.is_(None))
            return [_entry_record(e) for e in q.order_by(TimeEntry.start_time.desc()).all()]

    def update_time_entry(
        self,
        entry_id: int,
        *,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        total_hours: float | None = None,
        component_id=_UNSET,
        crew_count: int | None = None,
        worker_names: list[str] | None = None,
        select_workers: bool = False,
        notes: str | None = None,
    ) -> TimeEntryRecord:
        """Edit a time entry. The stored row changes only if every edit validates.

        Editing either timestamp re-derives total_hours from the pair; a typed
        total_hours given in the same call takes precedence. Pass
        component_id=None to turn the entry into clock-in time.
        """
        with self._session() as session:
            entry = session.get(TimeEntry, entry_id)
            if entry is None:
                raise ValueError("Time entry not found.")
            record = _entry_record(entry)
            with self._validating(f"Update time entry {entry_id}"):
                if start_time is not None or end_time is not None:
                    record = retime_entry(
                        record,
                        start_time if start_time is not None else record.start_time,
                        end_time if end_time is not None else record.end_time,
                    )
                if total_hours is not None:
                    record = set_entry_hours(record, total_hours)
                if crew_count is not None or worker_names is not None or select_workers:
                    record = recrew_entry(record, crew_count, worker_names, select_workers=select_workers)
            entry.start_time = record.start_time
            entry.end_time = record.end_time
            entry.total_hours = record.total_hours
            entry.is_manual = record.is_manual
            entry.crew_count = record.crew_count
            entry.worker_names = list(record.worker_names) or None
            if component_id is not _UNSET:
                entry.component_id = component_id
            if notes is not None:
                entry.notes = notes
            self._commit(session, f"Update time entry {entry_id}")
            session.refresh(entry)
            return _entry_record(entry)

    # --- Financial rows ---

    def get_financial_rows(self, job_id: int) -> list[FinancialRowRecord]:
        """Rows of a job in display order."""
        with self._session() as session:
            rows = session.query(FinancialRow).filter(FinancialRow.job_id == job_id).all()
            return sort_rows([_row_record(r) for r in rows])

    def _renumber_rows(self, session: Session, job_id: int) -> list[FinancialRow]:
        rows = session.query(FinancialRow).filter(FinancialRow.job_id == job_id).all()
        keys = renumber([_row_record(r) for r in rows])
        for row in rows:
            row.order_index = keys[row.id]
        session.flush()
        logger.info("Renumbered %d financial rows on job %s", len(rows), job_id)
        return rows

    def _position_key(self, session: Session, job_id: int, after_position: int | None, exclude_id=None) -> float:
        """Order key for a row placed after a display position (None = append)."""
        rows = session.query(FinancialRow).filter(FinancialRow.job_id == job_id).all()
        records = [_row_record(r) for r in rows if r.id != exclude_id]
        if after_position is None:
            return next_order_index(records)
        if needs_renumbering(records):
            self._renumber_rows(session, job_id)
            return self._position_key(session, job_id, after_position, exclude_id)
        key = insert_after(records, after_position)
        if any(r.order_index == key for r in records):
            self._renumber_rows(session, job_id)
            records = [_row_record(r) for r in rows if r.id != exclude_id]
            key = insert_after(records, after_position)
        return key

    def add_financial_row(
        self,
        job_id: int,
        category: str,
        description: str,
        quantity: float,
        unit_cost: float,
        markup_percent: float = 0.0,
        *,
        after_position: int | None = None,
        notes: str = "",
    ) -> FinancialRowRecord:
        """Create a row, appended or placed after a display position (-1 = top)."""
        self._require_office()
        with self._session() as session:
            if session.get(Job, job_id) is None:
                raise ValueError("Job not found.")
            with self._validating("Add financial row"):
                record = new_financial_row(
                    job_id, category, description, quantity, unit_cost, markup_percent,
                    order_index=0.0, notes=notes,
                )
            try:
                key = self._position_key(session, job_id, after_position)
            except IndexError as exc:
                raise ValidationError(str(exc)) from exc
            row = FinancialRow(job_id=job_id, order_index=key)
            _apply_row(row, record)
            session.add(row)
            self._commit(session, f"Add {category} row on job {job_id}")
            session.refresh(row)
            return _row_record(row)

    def update_financial_row(self, row_id: int, **changes) -> FinancialRowRecord:
        """Edit a row's inputs; totals are recomputed and its position is kept."""
        self._require_office()
        with self._session() as session:
            row = session.get(FinancialRow, row_id)
            if row is None:
                raise ValueError("Financial row not found.")
            with self._validating(f"Update financial row {row_id}"):
                record = edit_financial_row(_row_record(row), **changes)
            _apply_row(row, record)
            self._commit(session, f"Update financial row {row_id}")
            session.refresh(row)
            return _row_record(row)

    def delete_financial_row(self, row_id: int) -> None:
        self._require_office()
        with self._session() as session:
            row = session.get(FinancialRow, row_id)
            if row is None:
                raise ValueError("Financial row not found.")
            session.delete(row)
            self._commit(session, f"Delete financial row {row_id}")

    def move_financial_row(self, row_id: int, after_position: int) -> FinancialRowRecord:
        """Reposition a row after a display position of the remaining rows (-1 = top)."""
        self._require_office()
        with self._session() as session:
            row = session.get(FinancialRow, row_id)
            if row is None:
                raise ValueError("Financial row not found.")
            try:
                row.order_index = self._position_key(session, row.job_id, after_position, exclude_id=row_id)
            except IndexError as exc:
                raise ValidationError(str(exc)) from exc
            self._commit(session, f"Move financial row {row_id}")
            session.refresh(row)
            return _row_record(row)

    def swap_financial_rows(self, first_id: int, second_id: int) -> None:
        """Drag-and-drop reorder: the two rows exchange positions."""
        self._require_office()
        with self._session() as session:
            first = session.get(FinancialRow, first_id)
            second = session.get(FinancialRow, second_id)
            if first is None or second is None:
                raise ValueError("Financial row not found.")
            first.order_index, second.order_index = swap_order(first, second)
            self._commit(session, f"Swap financial rows {first_id} and {second_id}")

    # --- Labor pricing ---

    def set_labor_pricing(self, job_id: int, hourly_rate: float) -> LaborPricingRecord:
        """Set the job's labor rate. Labor is billed at cost, so both rates are equal."""
        self._require_office()
        if hourly_rate is None or hourly_rate < 0:
            raise ValidationError("Hourly rate must be non-negative.")
        with self._session() as session:
            if session.get(Job, job_id) is None:
                raise ValueError("Job not found.")
            pricing = session.query(LaborPricing).filter(LaborPricing.job_id == job_id).first()
            if pricing is None:
                pricing = LaborPricing(job_id=job_id)
                session.add(pricing)
            pricing.hourly_rate = float(hourly_rate)
            pricing.billable_rate = float(hourly_rate)
            self._commit(session, f"Set labor pricing on job {job_id}")
            return LaborPricingRecord(job_id, pricing.hourly_rate, pricing.billable_rate)

    def get_labor_pricing(self, job_id: int) -> LaborPricingRecord | None:
        with self._session() as session:
            pricing = session.query(LaborPricing).filter(LaborPricing.job_id == job_id).first()
            if pricing is None:
                return None
            return LaborPricingRecord(job_id, pricing.hourly_rate, pricing.billable_rate)

    # --- Materials ---

    def add_material_workbook(self, job_id: int, status: str = "working") -> int:
        with self._session() as session:
            if session.get(Job, job_id) is None:
                raise ValueError("Job not found.")
            workbook = MaterialWorkbook(job_id=job_id, status=status)
            session.add(workbook)
            self._commit(session, f"Create {status} workbook on job {job_id}")
            return workbook.id

    def add_material_sheet(self, workbook_id: int, sheet_name: str, order_index: float | None = None) -> int:
        with self._session() as session:
            workbook = session.get(MaterialWorkbook, workbook_id)
            if workbook is None:
                raise ValueError("Workbook not found.")
            if order_index is None:
                order_index = next_order_index(workbook.sheets)
            sheet = MaterialSheet(workbook_id=workbook_id, sheet_name=sheet_name, order_index=order_index)
            session.add(sheet)
            self._commit(session, f"Create sheet {sheet_name!r}")
            return sheet.id

    def add_material_item(
        self,
        sheet_id: int,
        material_name: str,
        quantity: float,
        *,
        category: str | None = None,
        cost_per_unit: float | None = None,
        price_per_unit: float | None = None,
    ) -> MaterialItemRecord:
        if quantity is None:
            raise ValidationError("Quantity is required.")
        with self._session() as session:
            if session.get(MaterialSheet, sheet_id) is None:
                raise ValueError("Sheet not found.")
            item = MaterialItem(
                sheet_id=sheet_id,
                material_name=material_name,
                quantity=quantity,
                category=category,
                cost_per_unit=cost_per_unit,
                price_per_unit=price_per_unit,
            )
            session.add(item)
            self._commit(session, f"Add material {material_name!r}")
            return MaterialItemRecord(
                item.id, sheet_id, category or "", material_name, quantity, cost_per_unit, price_per_unit
            )

    def set_sheet_labor(
        self,
        sheet_id: int,
        estimated_hours: float,
        hourly_rate: float,
        *,
        description: str = "Labor & Installation",
        notes: str = "",
    ) -> MaterialSheetLaborRecord:
        """Create or replace the labor priced with a sheet (one per sheet)."""
        self._require_office()
        with self._validating(f"Set labor on sheet {sheet_id}"):
            for label, value in (("Estimated hours", estimated_hours), ("Hourly rate", hourly_rate)):
                if value is None or value < 0:
                    raise ValidationError(f"{label} must be non-negative.")
        with self._session() as session:
            sheet = session.get(MaterialSheet, sheet_id)
            if sheet is None:
                raise ValueError("Sheet not found.")
            labor = sheet.labor
            if labor is None:
                labor = MaterialSheetLabor(sheet_id=sheet_id)
                session.add(labor)
            labor.description = description
            labor.estimated_hours = float(estimated_hours)
            labor.hourly_rate = float(hourly_rate)
            labor.notes = notes or ""
            self._commit(session, f"Set labor on sheet {sheet_id}")
            session.refresh(labor)
            return _sheet_labor_record(labor)

    def get_material_sheets(self, job_id: int) -> list[MaterialSheetRecord]:
        """Sheets (with items) of the job's working workbook; empty when there is none."""
        with self._session() as session:
            workbook = (
                session.query(MaterialWorkbook)
                .filter(MaterialWorkbook.job_id == job_id, MaterialWorkbook.status == "working")
                .order_by(MaterialWorkbook.id)
                .first()
            )
            if workbook is None:
                return []
            return [
                MaterialSheetRecord(
                    id=s.id,
                    sheet_name=s.sheet_name,
                    order_index=s.order_index,
                    items=tuple(
                        MaterialItemRecord(
                            i.id, s.id, i.category or "", i.material_name, i.quantity,
                            i.cost_per_unit, i.price_per_unit,
                        )
                        for i in s.items
                    ),
                    labor=_sheet_labor_record(s.labor) if s.labor is not None else None,
                )
                for s in sorted(workbook.sheets, key=lambda s: (s.order_index, s.id))
            ]

    # --- Subcontractor estimates ---

    def add_subcontractor_estimate(
        self, job_id: int, company_name: str, total_amount: float, markup_percent: float = 0.0
    ) -> SubcontractorEstimateRecord:
        self._require_office()
        if total_amount is None:
            raise ValidationError("Total amount is required.")
        with self._session() as session:
            if session.get(Job, job_id) is None:
                raise ValueError("Job not found.")
            existing = [
                _estimate_record(s)
                for s in session.query(SubcontractorEstimate).filter(SubcontractorEstimate.job_id == job_id)
            ]
            estimate = SubcontractorEstimate(
                job_id=job_id,
                company_name=company_name,
                total_amount=float(total_amount),
                markup_percent=float(markup_percent or 0.0),
                order_index=next_order_index(existing),
            )
            session.add(estimate)
            self._commit(session, f"Add subcontractor estimate {company_name!r}")
            session.refresh(estimate)
            return _estimate_record(estimate)

    def get_subcontractor_estimates(self, job_id: int) -> list[SubcontractorEstimateRecord]:
        with self._session() as session:
            rows = session.query(SubcontractorEstimate).filter(SubcontractorEstimate.job_id == job_id).all()
            return sort_rows([_estimate_record(s) for s in rows])

    # --- Reports (recomputed on every call) ---

    def get_time_summary(
        self, job_id: int, *, clock_in_only: bool = False, tz: tzinfo | None = None
    ) -> TimeSummary:
        return summarize_time(
            self.get_time_entries(job_id),
            component_names=self.get_component_names(job_id),
            user_names=self.get_user_names(),
            tz=self._tz(tz),
            clock_in_only=clock_in_only,
        )

    def get_clocked_man_hours(self, job_id: int) -> float:
        """Man-hours of clock-in entries: the figure budgets are measured against."""
        return sum(entry_man_hours(e) for e in only_clock_in(self.get_time_entries(job_id)))

    def get_cost_breakdown(self, job_id: int) -> CostBreakdown:
        return cost_breakdown(
            sheets=self.get_material_sheets(job_id),
            rows=self.get_financial_rows(job_id),
            subcontractor_estimates=self.get_subcontractor_estimates(job_id),
            labor_pricing=self.get_labor_pricing(job_id),
            clocked_man_hours=self.get_clocked_man_hours(job_id),
        )

    def get_proposal(self, job_id: int, markup_percent: float = 0.0) -> Proposal:
        return build_proposal(
            sheets=self.get_material_sheets(job_id),
            rows=self.get_financial_rows(job_id),
            subcontractor_estimates=self.get_subcontractor_estimates(job_id),
            markup_percent=markup_percent,
        )

    def get_budget_progress(self, job_id: int) -> BudgetProgress:
        """Clock-in man-hours against the job's estimated hours."""
        job = self.get_job(job_id)
        return budget_progress(self.get_clocked_man_hours(job_id), job.estimated_hours)

    def get_labor_budget_progress(self, job_id: int) -> BudgetProgress:
        """Clock-in man-hours against the hours budgeted on labor rows and sheet labor."""
        budget = self.get_cost_breakdown(job_id).budgeted_labor_hours
        return budget_progress(self.get_clocked_man_hours(job_id), budget)
