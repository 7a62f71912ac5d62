"""Pydantic models for CorpCulture API records.

The backend owns every record's shape. Models declare only the fields the
client reads and keep everything else as extras.
"""

from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError

Reference = Union[str, dict[str, Any], None]


def reference_id(value: Reference) -> Optional[str]:
    """Id of a reference that may be populated or a bare id string."""
    if isinstance(value, dict):
        return value.get("_id")
    return value


def reference_field(value: Reference, key: str) -> Optional[Any]:
    """Field of a populated reference, or None when it was not populated."""
    if isinstance(value, dict):
        return value.get(key)
    return None


class Record(BaseModel):
    """Base for all server records."""

    id: Optional[str] = Field(default=None, alias="_id")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True
        extra = "allow"

    @classmethod
    def from_api(cls, data: dict) -> "Record":
        """Create a record from API response data."""
        return cls.model_validate(data)

    @classmethod
    def parse_many(cls, items: Optional[list]) -> list:
        """Parse a list of records, skipping entries that do not validate."""
        records = []
        for data in items or []:
            try:
                records.append(cls.from_api(data))
            except (ValidationError, TypeError):
                continue
        return records

    def to_api(self) -> dict[str, Any]:
        """Dump back to the server's field names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def lookup(self, path: str) -> Any:
        """Resolve a dotted path such as ``companyId.companyName``.

        A bare name of a model property (``display_date``) resolves to it.
        """
        if "." not in path and isinstance(getattr(type(self), path, None), property):
            return getattr(self, path)

        value: Any = self.model_dump(by_alias=True)
        for part in path.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(part)
        return value


class User(Record):
    """A platform user."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: int = 0
    address: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown"


class Company(Record):
    """A customer company."""

    company_name: Optional[str] = Field(default=None, alias="companyName")
    contact_person: Optional[str] = Field(default=None, alias="contactPerson")
    customer_type: Optional[str] = Field(default=None, alias="customerType")
    phone: Optional[str] = None
    email: Optional[str] = None
    address_detail: Optional[str] = Field(default=None, alias="addressDetail")
    city: Optional[str] = None
    state: Optional[str] = None
    user_id: Reference = Field(default=None, alias="userId")

    @property
    def display_name(self) -> str:
        return self.company_name or self.contact_person or self.phone or "Unknown"


class Employee(Record):
    """An employee profile linked to a user account."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    employee_type: Optional[str] = Field(default=None, alias="employeeType")
    hire_date: Optional[str] = Field(default=None, alias="hireDate")
    salary: Optional[Decimal] = None
    user_id: Reference = Field(default=None, alias="userId")


class Credit(Record):
    """A credit movement on a company account."""

    company_id: Reference = Field(default=None, alias="companyId")
    amount: Decimal = Decimal("0")
    credit_type: Optional[str] = Field(default=None, alias="creditType")
    description: Optional[str] = None
    created_by: Reference = Field(default=None, alias="createdBy")

    @property
    def company_name(self) -> str:
        return reference_field(self.company_id, "companyName") or reference_id(self.company_id) or "-"

    @property
    def signed_amount(self) -> Decimal:
        """Amount with 'Used' credits counted as negative."""
        if self.credit_type == "Used":
            return -self.amount
        return self.amount


class ServiceEnquiry(Record):
    """A service ticket raised by or for a customer."""

    company_name: Optional[str] = Field(default=None, alias="companyName")
    contact_person: Optional[str] = Field(default=None, alias="contactPerson")
    phone: Optional[str] = None
    email: Optional[str] = None
    complaint: Optional[str] = None
    service_type: Optional[str] = Field(default=None, alias="serviceType")
    status: Optional[str] = None
    location: Optional[str] = None


class ServiceReport(Record):
    """A field service report or gate pass."""

    report_type: Optional[str] = Field(default=None, alias="reportType")
    report_for: Optional[str] = Field(default=None, alias="reportFor")
    company: Reference = None
    problem_report: Optional[str] = Field(default=None, alias="problemReport")
    model_number: Optional[str] = Field(default=None, alias="modelNo")
    serial_no: Optional[str] = Field(default=None, alias="serialNo")
    branch: Optional[str] = None
    assigned_to: Reference = Field(default=None, alias="assignedTo")

    @property
    def company_name(self) -> str:
        return reference_field(self.company, "companyName") or reference_id(self.company) or "-"


class RentalInvoice(Record):
    """A rental payment entry, which becomes an invoice once sent."""

    invoice_number: Optional[Union[str, int]] = Field(default=None, alias="invoiceNumber")
    invoice_type: Optional[str] = Field(default=None, alias="invoiceType")
    company_id: Reference = Field(default=None, alias="companyId")
    rental_id: Reference = Field(default=None, alias="rentalId")
    assigned_to: Reference = Field(default=None, alias="assignedTo")
    entry_date: Optional[str] = Field(default=None, alias="entryDate")
    invoice_date: Optional[str] = Field(default=None, alias="invoiceDate")
    mode_of_payment: Optional[str] = Field(default=None, alias="modeOfPayment")
    payment_amount_type: Optional[str] = Field(default=None, alias="paymentAmountType")
    status: Optional[str] = None
    invoice_link: list[str] = Field(default_factory=list, alias="invoiceLink")
    remarks: Optional[str] = None

    @property
    def company_name(self) -> str:
        return reference_field(self.company_id, "companyName") or reference_id(self.company_id) or "-"

    @property
    def assignee_name(self) -> str:
        return reference_field(self.assigned_to, "name") or "-"

    @property
    def display_date(self) -> str:
        """Invoice date, falling back to entry then creation date."""
        value = self.invoice_date or self.entry_date or self.created_at
        return value[:10] if value else "-"


class ActivityLog(Record):
    """A daily field activity entry logged by an employee."""

    employee_id: Reference = Field(default=None, alias="employeeId")
    user_id: Reference = Field(default=None, alias="userId")
    date: Optional[str] = None
    from_company_name: Optional[str] = Field(default=None, alias="fromCompanyName")
    to_company_name: Optional[str] = Field(default=None, alias="toCompanyName")
    km: Optional[Decimal] = None
    in_time: Optional[str] = Field(default=None, alias="inTime")
    out_time: Optional[str] = Field(default=None, alias="outTime")
    call_type: Optional[str] = Field(default=None, alias="callType")
    leave_or_work: Optional[str] = Field(default=None, alias="leaveOrWork")
    status: Optional[str] = None
    remarks: Optional[str] = None

    @property
    def employee_name(self) -> str:
        return reference_field(self.employee_id, "name") or reference_id(self.employee_id) or "-"


class LeaveApplication(Record):
    """An employee leave request with its approval trail."""

    employee_id: Reference = Field(default=None, alias="employeeId")
    user_id: Reference = Field(default=None, alias="userId")
    leave_type: Optional[str] = Field(default=None, alias="leaveType")
    leave_type_other: Optional[str] = Field(default=None, alias="leaveTypeOther")
    leave_from: Optional[str] = Field(default=None, alias="leaveFrom")
    leave_to: Optional[str] = Field(default=None, alias="leaveTo")
    total_days: Optional[Decimal] = Field(default=None, alias="totalDays")
    reason: Optional[str] = None
    status: str = "Pending"
    manager_approval: str = Field(default="Pending", alias="managerApproval")
    hr_approval: str = Field(default="Pending", alias="hrApproval")

    @property
    def employee_name(self) -> str:
        return reference_field(self.employee_id, "name") or reference_id(self.employee_id) or "-"

    @property
    def display_type(self) -> str:
        if self.leave_type == "Other" and self.leave_type_other:
            return f"Other ({self.leave_type_other})"
        return self.leave_type or "-"


class Permission(Record):
    """A per-user grant of actions on a UI section key."""

    user_id: Reference = Field(default=None, alias="userId")
    name: Optional[str] = None
    key: str
    parent_key: Optional[str] = Field(default=None, alias="parentKey")
    actions: list[str] = Field(default_factory=list)
    section_type: Optional[str] = Field(default=None, alias="sectionType")

    def allows(self, action: str) -> bool:
        return action in self.actions


class Order(Record):
    """A product sales order placed through the shop."""

    buyer: Reference = None
    products: list[dict[str, Any]] = Field(default_factory=list)
    amount: Optional[Decimal] = None
    order_status: Optional[str] = Field(default=None, alias="orderStatus")
    shipping_info: Optional[dict[str, Any]] = Field(default=None, alias="shippingInfo")
    employee_id: Reference = Field(default=None, alias="employeeId")

    @property
    def buyer_name(self) -> str:
        return reference_field(self.buyer, "name") or reference_id(self.buyer) or "-"

    @property
    def assignee_name(self) -> str:
        return reference_field(self.employee_id, "name") or reference_id(self.employee_id) or "-"

    @property
    def display_status(self) -> str:
        """Orders start out without a status; they are shown as pending."""
        return self.order_status or "Pending"

    @property
    def item_count(self) -> int:
        return sum(int(item.get("quantity") or 1) for item in self.products)

    @property
    def shipping_address(self) -> str:
        info = self.shipping_info or {}
        parts = [info.get(key) for key in ("address", "city", "state", "pincode")]
        return ", ".join(str(part) for part in parts if part) or "-"
