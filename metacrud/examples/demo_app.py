##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
A demo application with two pairs of associated models.

Departments have employees and categories have products. The record types use
most of what Metacrud supports: constraints, enums, dates, decimals, a binary
upload, to-one associations, and the inverse to-many collections.

`build_demo_registry` is the default `application.registry` callable, so
`metacrud --local models` works out of the box. Repositories are created with
the engine named by the `backend.name` setting and seeded with sample data the
first time they are empty.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Type

from metacrud.backends.backend_factory import repository_factory
from metacrud.backends.repository import Repository
from metacrud.config import Config
from metacrud.config.configfile import get_default_config
from metacrud.metadata import (
    Email,
    IntrospectionService,
    Long,
    Max,
    Min,
    NotBlank,
    NotNull,
    Past,
    Positive,
    PositiveOrZero,
    Size,
    binary,
    column,
    identifier,
    many_to_one,
    one_to_many,
)
from metacrud.registry import ModelRegistry, ModelRegistryBuilder


LOG = logging.getLogger(__name__)


class EmploymentType(Enum):
    FULL_TIME = "Full time"
    PART_TIME = "Part time"
    CONTRACT = "Contract"
    INTERN = "Intern"


class EmployeeStatus(Enum):
    ACTIVE = "Active"
    ON_LEAVE = "On leave"
    TERMINATED = "Terminated"


@dataclass
class Department:
    id: Optional[Long] = identifier()
    name: Optional[str] = column(constraints=[NotBlank(message="Department name is required"), Size(min=2, max=100)])
    description: Optional[str] = column(constraints=[Size(max=500)])
    employees: List["Employee"] = one_to_many(mapped_by="department")


@dataclass
class Employee:
    id: Optional[Long] = identifier()
    first_name: Optional[str] = column(
        order=1, constraints=[NotBlank(message="First name is required"), Size(min=2, max=50)]
    )
    last_name: Optional[str] = column(
        order=2, constraints=[NotBlank(message="Last name is required"), Size(min=2, max=50)]
    )
    email: Optional[str] = column(order=3, constraints=[Email(message="Invalid email format"), NotBlank()])
    birth_date: Optional[date] = column(constraints=[Past(message="Birth date must be in the past"), NotNull()])
    age: Optional[int] = column(
        constraints=[
            Min(18, message="Employee must be at least 18 years old"),
            Max(100, message="Age cannot exceed 100"),
        ]
    )
    salary: Optional[Decimal] = column(constraints=[Positive(message="Salary must be positive"), NotNull()])
    department: Optional[Department] = many_to_one(constraints=[NotNull(message="Department is required")])
    employment_type: Optional[EmploymentType] = column(constraints=[NotNull()])
    status: Optional[EmployeeStatus] = column(EmployeeStatus.ACTIVE)
    hire_date: Optional[datetime] = column(default_factory=datetime.now, read_only=True)
    profile_picture: Optional[bytes] = binary()
    notes: Optional[str] = column(constraints=[Size(max=1000)])


@dataclass
class Category:
    id: Optional[Long] = identifier()
    name: Optional[str] = column(constraints=[NotBlank(message="Category name is required"), Size(min=2, max=100)])
    description: Optional[str] = column(constraints=[Size(max=500)])
    products: List["Product"] = one_to_many(mapped_by="category")


@dataclass
class Product:
    id: Optional[Long] = identifier()
    name: Optional[str] = column(
        order=1, constraints=[NotBlank(message="Product name is required"), Size(min=3, max=200)]
    )
    description: Optional[str] = column(constraints=[Size(max=1000)])
    price: Optional[Decimal] = column(
        constraints=[NotNull(message="Price is required"), Positive(message="Price must be positive")]
    )
    stock: Optional[int] = column(0, constraints=[PositiveOrZero(message="Stock cannot be negative")])
    sku: Optional[str] = column(label="SKU", constraints=[NotBlank()])
    category: Optional[Category] = many_to_one()
    active: Optional[bool] = column(True)
    created_at: Optional[datetime] = column(default_factory=datetime.now, read_only=True)
    product_image: Optional[bytes] = binary()


def _repository_options(
    backend: SimpleNamespace,
    record_type: Type,
    introspection: IntrospectionService,
    related: Dict[str, Repository] = None,
) -> Dict[str, Any]:
    """
    Build the keyword arguments for creating a repository with the configured engine.

    Args:
        backend: The `backend` configuration section.
        record_type: The record type the repository will store.
        introspection: The introspection service shared by every repository.
        related: Repositories of the record type's associated models.

    Returns:
        The keyword arguments for `repository_factory.create`.
    """
    options: Dict[str, Any] = {"record_type": record_type, "id_type": Long, "introspection": introspection}
    if backend.name == "sqlite":
        options.update(db_path=backend.path, related=related)
    elif backend.name in ("redis", "rediss"):
        options.update(host=backend.host, port=backend.port, db=backend.db, related=related)
    return options


def seed_demo_data(registry: ModelRegistry):
    """
    Fill empty demo repositories with sample records.

    Args:
        registry: A registry holding the demo models.
    """
    departments = registry.require("Department").repository
    employees = registry.require("Employee").repository
    categories = registry.require("Category").repository
    products = registry.require("Product").repository

    if not departments.find_all():
        engineering = departments.save(Department(name="Engineering", description="Software development and IT"))
        hr = departments.save(Department(name="Human Resources", description="Employee management and recruitment"))
        sales = departments.save(Department(name="Sales", description="Product sales and customer relations"))
        marketing = departments.save(Department(name="Marketing", description="Brand promotion and advertising"))
        LOG.info("Created 4 departments")

        for first, last, born, age, salary, department, employment_type in (
            ("John", "Doe", date(1990, 5, 15), 33, "85000.00", engineering, EmploymentType.FULL_TIME),
            ("Jane", "Smith", date(1988, 8, 22), 35, "92000.00", engineering, EmploymentType.FULL_TIME),
            ("Mike", "Johnson", date(1995, 3, 10), 28, "65000.00", hr, EmploymentType.FULL_TIME),
            ("Sarah", "Williams", date(1992, 11, 5), 31, "78000.00", sales, EmploymentType.FULL_TIME),
            ("Tom", "Brown", date(2000, 1, 20), 24, "45000.00", marketing, EmploymentType.PART_TIME),
        ):
            employees.save(
                Employee(
                    first_name=first,
                    last_name=last,
                    email=f"{first.lower()}.{last.lower()}@example.com",
                    birth_date=born,
                    age=age,
                    salary=Decimal(salary),
                    department=department,
                    employment_type=employment_type,
                )
            )
        LOG.info("Created 5 employees")

    if not categories.find_all():
        electronics = categories.save(Category(name="Electronics", description="Electronic devices and accessories"))
        clothing = categories.save(Category(name="Clothing", description="Apparel and fashion items"))
        books = categories.save(Category(name="Books", description="Physical and digital books"))
        home = categories.save(Category(name="Home & Garden", description="Home improvement and garden supplies"))
        LOG.info("Created 4 categories")

        for name, description, price, stock, sku, category in (
            ("Laptop Pro 15", "High-performance laptop with 16GB RAM", "1299.99", 25, "LAP-PRO-15", electronics),
            ("Wireless Mouse", "Ergonomic wireless mouse with USB receiver", "29.99", 150, "MOUSE-WL-01", electronics),
            ("T-Shirt Cotton", "100% cotton t-shirt", "19.99", 200, "TSHIRT-COT-M", clothing),
            ("Running Shoes", "Lightweight running shoes with cushioned sole", "89.99", 75, "SHOE-RUN-42", clothing),
            ("Python Programming Guide", "Guide to modern Python development", "49.99", 50, "BOOK-PY-001", books),
            ("Garden Tool Set", "Complete 10-piece garden tool set", "79.99", 30, "GARDEN-SET-10", home),
        ):
            products.save(
                Product(
                    name=name, description=description, price=Decimal(price), stock=stock, sku=sku, category=category
                )
            )
        LOG.info("Created 6 products")


def build_demo_registry(config: Config = None) -> ModelRegistry:
    """
    Create, register, and seed the demo models' repositories.

    Args:
        config: The application configuration. The defaults are used when omitted.

    Returns:
        The registry holding Department, Employee, Category, and Product.
    """
    config = config or Config(get_default_config())
    introspection = IntrospectionService()
    backend = config.backend
    LOG.debug(f"Creating demo repositories with the '{backend.name}' backend")

    def create(record_type: Type, related: Dict[str, Repository] = None) -> Repository:
        return repository_factory.create(backend.name, _repository_options(backend, record_type, introspection, related))

    departments = create(Department)
    categories = create(Category)
    employees = create(Employee, related={"Department": departments})
    products = create(Product, related={"Category": categories})

    builder = ModelRegistryBuilder(strict=bool(config.admin.strict_registration), introspection=introspection)
    builder.register(Department, Long, departments)
    builder.register(Employee, Long, employees)
    builder.register(Category, Long, categories)
    builder.register(Product, Long, products)
    registry = builder.build()

    seed_demo_data(registry)
    return registry
