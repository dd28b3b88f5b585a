from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, DateTime, Float, JSON, UniqueConstraint
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime

Base = declarative_base()

ROLE_OFFICE = "office"
ROLE_FOREMAN = "foreman"
ROLE_CREW = "crew"
ROLES = (ROLE_OFFICE, ROLE_FOREMAN, ROLE_CREW)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    role = Column(String, nullable=False, default=ROLE_CREW)

    time_entries = relationship("TimeEntry", back_populates="user")


class Job(Base):
    __tablename__ = "jobs"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    estimated_hours = Column(Float, nullable=True)

    components = relationship("Component", back_populates="job", cascade="all, delete-orphan")
    time_entries = relationship("TimeEntry", back_populates="job", cascade="all, delete-orphan")
    financial_rows = relationship("FinancialRow", back_populates="job", cascade="all, delete-orphan")
    labor_pricing = relationship("LaborPricing", back_populates="job", uselist=False, cascade="all, delete-orphan")
    workbooks = relationship("MaterialWorkbook", back_populates="job", cascade="all, delete-orphan")
    subcontractor_estimates = relationship(
        "SubcontractorEstimate", back_populates="job", cascade="all, delete-orphan"
    )


class Component(Base):
    __tablename__ = "components"
    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    # Shown to crews as a task they can clock time against.
    is_task = Column(Boolean, default=False, nullable=False)

    job = relationship("Job", back_populates="components")


class TimeEntry(Base):
    __tablename__ = "time_entries"
    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    # NULL = clock-in time not tied to a component
    component_id = Column(Integer, ForeignKey("components.id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    start_time = Column(DateTime, default=datetime.now, nullable=False)
    end_time = Column(DateTime, nullable=True)
    total_hours = Column(Float, default=0.0, nullable=False)
    crew_count = Column(Integer, default=1, nullable=False)
    worker_names = Column(JSON, nullable=True)
    is_manual = Column(Boolean, default=False, nullable=False)
    notes = Column(String, nullable=True)

    job = relationship("Job", back_populates="time_entries")
    user = relationship("User", back_populates="time_entries")


class FinancialRow(Base):
    __tablename__ = "financial_rows"
    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    quantity = Column(Float, nullable=False)
    unit_cost = Column(Float, nullable=False)
    markup_percent = Column(Float, nullable=False, default=0.0)
    total_cost = Column(Float, nullable=False, default=0.0)
    selling_price = Column(Float, nullable=False, default=0.0)
    order_index = Column(Float, nullable=False, default=0.0)
    notes = Column(String, nullable=True)

    job = relationship("Job", back_populates="financial_rows")


class LaborPricing(Base):
    __tablename__ = "labor_pricing"
    __table_args__ = (UniqueConstraint("job_id", name="uq_labor_pricing_job"),)
    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    hourly_rate = Column(Float, nullable=False)
    billable_rate = Column(Float, nullable=False)

    job = relationship("Job", back_populates="labor_pricing")


class MaterialWorkbook(Base):
    __tablename__ = "material_workbooks"
    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    # Only the "working" workbook feeds the rollup.
    status = Column(String, nullable=False, default="working")

    job = relationship("Job", back_populates="workbooks")
    sheets = relationship("MaterialSheet", back_populates="workbook", cascade="all, delete-orphan")


class MaterialSheet(Base):
    __tablename__ = "material_sheets"
    id = Column(Integer, primary_key=True)
    workbook_id = Column(Integer, ForeignKey("material_workbooks.id"), nullable=False)
    sheet_name = Column(String, nullable=False)
    order_index = Column(Float, nullable=False, default=0.0)

    workbook = relationship("MaterialWorkbook", back_populates="sheets")
    items = relationship("MaterialItem", back_populates="sheet", cascade="all, delete-orphan")
    labor = relationship(
        "MaterialSheetLabor", back_populates="sheet", uselist=False, cascade="all, delete-orphan"
    )


class MaterialItem(Base):
    __tablename__ = "material_items"
    id = Column(Integer, primary_key=True)
    sheet_id = Column(Integer, ForeignKey("material_sheets.id"), nullable=False)
    category = Column(String, nullable=True)
    material_name = Column(String, nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    cost_per_unit = Column(Float, nullable=True)
    price_per_unit = Column(Float, nullable=True)

    sheet = relationship("MaterialSheet", back_populates="items")


class MaterialSheetLabor(Base):
    """Installation labor priced with a sheet: estimated hours at an hourly rate."""

    __tablename__ = "material_sheet_labor"
    __table_args__ = (UniqueConstraint("sheet_id", name="uq_material_sheet_labor_sheet"),)
    id = Column(Integer, primary_key=True)
    sheet_id = Column(Integer, ForeignKey("material_sheets.id"), nullable=False)
    description = Column(String, nullable=False, default="Labor & Installation")
    estimated_hours = Column(Float, nullable=False, default=0.0)
    hourly_rate = Column(Float, nullable=False, default=0.0)
    notes = Column(String, nullable=True)

    sheet = relationship("MaterialSheet", back_populates="labor")


class SubcontractorEstimate(Base):
    __tablename__ = "subcontractor_estimates"
    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    company_name = Column(String, nullable=False)
    total_amount = Column(Float, nullable=False, default=0.0)
    markup_percent = Column(Float, nullable=False, default=0.0)
    order_index = Column(Float, nullable=False, default=0.0)

    job = relationship("Job", back_populates="subcontractor_estimates")
