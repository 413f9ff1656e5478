"""Unit tests for the @postgres_mapper decorator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any

import pytest
from pydantic import AliasChoices, AliasPath, BaseModel, Field

from pg_mapper.core.exceptions import (
    ColumnNotFoundError,
    FlattenTargetError,
    MissingDefaultError,
    MissingTableError,
    UnknownContainerAttributeError,
    UnsupportedRecordError,
)
from pg_mapper.core.options import MapperOptions
from pg_mapper.mapping.attributes import Collection, Flatten, Ignore, PgMapper
from pg_mapper.mapping.derive import PLAN_ATTRIBUTE, derive, mapping_plan, postgres_mapper
from pg_mapper.mapping.protocol import FromRow


@postgres_mapper(table="users")
@dataclass
class User:
    id: int
    name: str
    secret: Annotated[str, Ignore] = ""


@postgres_mapper(table="addresses")
@dataclass
class Address:
    street: str
    city: str


@postgres_mapper(table="customers")
@dataclass
class Customer:
    id: int
    address: Annotated[Address, Flatten]
    orders: Annotated[list[int], Collection] = field(default_factory=list)


@postgres_mapper(table="accounts")
@dataclass
class Account:
    id: int
    owner: Annotated[Customer, Flatten]


@postgres_mapper(table="products")
class Product(BaseModel):
    sku: str
    price: float
    cached: Annotated[str, Ignore] = "n/a"


@postgres_mapper(table="recorders")
class Recorder:
    """Plain record that remembers the keyword arguments it was built with."""

    def __init__(self, id: int, name: str) -> None:
        self.kwargs = {"id": id, "name": name}


@dataclass
class Bare:
    id: int


@dataclass
class NeedsDefault:
    id: int
    secret: Annotated[str, Ignore]


@dataclass
class FlattensUnmapped:
    id: int
    bare: Annotated[Bare, Flatten]


@dataclass
class Member(User):
    level: int = 0


@postgres_mapper(table="admins")
@dataclass
class Admin(User):
    level: int = 0


@dataclass
class FlattensMember:
    id: int
    member: Annotated[Member, Flatten]


@postgres_mapper(table="people")
class Person(BaseModel):
    id: int
    user_name: str = Field(alias="userName")
    note: str = Field("", validation_alias=AliasChoices("noteText", "note"))


class Located(BaseModel):
    city: str = Field(validation_alias=AliasPath("address", "city"))


class Mood(Enum):
    HAPPY = "happy"


class TestExample:
    def test_metadata(self) -> None:
        assert User.sql_table() == "users"
        assert User.sql_fields() == " id ,  name "
        assert User.sql_table_fields() == " users.id ,  users.name "

    def test_from_row(self) -> None:
        assert User.from_row({"id": 1, "name": "a"}) == User(id=1, name="a", secret="")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(User, FromRow)
        assert not isinstance(Bare, FromRow)


class TestEntryPoints:
    def test_all_entry_points_agree(self) -> None:
        row = {"id": 1, "name": "a"}
        assert User.from_row(row) == User.from_row_ref(row)
        assert User.from_row_ref_prefixed({"p_id": 1, "p_name": "a"}, "p_") == User.from_row(row)

    def test_from_row_does_not_mutate_row(self) -> None:
        row = {"id": 1, "name": "a"}
        User.from_row_ref(row)
        assert row == {"id": 1, "name": "a"}

    def test_from_row_accepts_keyed_rows(self) -> None:
        class KeyedRow:
            def __init__(self, data: dict[str, Any]) -> None:
                self._data = data

            def keys(self) -> list[str]:
                return list(self._data)

            def __getitem__(self, key: str) -> Any:
                return self._data[key]

        assert User.from_row(KeyedRow({"id": 2, "name": "b"})).id == 2

    def test_errors_propagate(self) -> None:
        with pytest.raises(ColumnNotFoundError):
            User.from_row({"id": 1})

    def test_plan_attached(self) -> None:
        plan = mapping_plan(User)
        assert getattr(User, PLAN_ATTRIBUTE) is plan
        assert plan.field_names == ["id", "name"]

    def test_mapping_plan_of_underived_class(self) -> None:
        with pytest.raises(UnsupportedRecordError):
            mapping_plan(Bare)


class TestFlatten:
    def test_nested_record_from_same_row(self) -> None:
        row = {"id": 7, "street": "Main", "city": "Oslo"}
        customer = Customer.from_row(row)
        assert customer.address == Address(street="Main", city="Oslo")
        assert customer.orders == []

    def test_nested_uses_parent_prefix(self) -> None:
        row = {"c_id": 7, "c_street": "Main", "c_city": "Oslo"}
        customer = Customer.from_row_ref_prefixed(row, "c_")
        assert customer.address == Address.from_row_ref_prefixed(row, "c_")

    def test_deep_nesting(self) -> None:
        account = Account.from_row({"id": 1, "street": "Main", "city": "Oslo"})
        assert account.owner.id == 1
        assert account.owner.address.city == "Oslo"

    def test_flattened_field_listed_in_columns(self) -> None:
        assert Customer.sql_fields() == " id ,  address "
        assert Customer.sql_table_fields() == " customers.id ,  customers.address "

    def test_nested_error_propagates(self) -> None:
        with pytest.raises(ColumnNotFoundError, match="city"):
            Customer.from_row({"id": 7, "street": "Main"})

    def test_flatten_target_must_be_derived(self) -> None:
        with pytest.raises(FlattenTargetError):
            postgres_mapper(table="x")(FlattensUnmapped)


class TestInheritance:
    def test_undecorated_subclass_refuses_base_mapper(self) -> None:
        with pytest.raises(UnsupportedRecordError, match="Member"):
            Member.from_row({"id": 1, "name": "a"})
        with pytest.raises(UnsupportedRecordError, match="inherits the mapper of User"):
            Member.from_row_ref_prefixed({"id": 1, "name": "a"}, "")
        with pytest.raises(UnsupportedRecordError):
            Member.sql_fields()

    def test_base_unaffected_by_subclass(self) -> None:
        assert type(User.from_row({"id": 1, "name": "a"})) is User

    def test_undecorated_subclass_is_not_a_flatten_target(self) -> None:
        with pytest.raises(FlattenTargetError, match="Member"):
            postgres_mapper(table="x")(FlattensMember)

    def test_undecorated_subclass_has_no_plan(self) -> None:
        with pytest.raises(UnsupportedRecordError):
            mapping_plan(Member)

    def test_decorated_subclass(self) -> None:
        admin = Admin.from_row({"id": 2, "name": "b", "level": 3})
        assert admin == Admin(id=2, name="b", level=3)
        assert type(admin) is Admin
        assert Admin.sql_table() == "admins"
        assert Admin.sql_fields() == " id ,  name ,  level "
        assert User.sql_table() == "users"


class TestRecordKinds:
    def test_pydantic(self) -> None:
        product = Product.from_row({"sku": "A1", "price": 9.5})
        assert product == Product(sku="A1", price=9.5, cached="n/a")
        assert Product.sql_fields() == " sku ,  price "

    def test_plain_class_gets_every_field(self) -> None:
        record = Recorder.from_row({"id": 1, "name": "a"})
        assert record.kwargs == {"id": 1, "name": "a"}
        assert mapping_plan(Recorder).has_excluded is False

    def test_pydantic_aliases(self) -> None:
        person = Person.from_row({"id": 1, "user_name": "a", "note": "hi"})
        assert (person.id, person.user_name, person.note) == (1, "a", "hi")
        assert Person.sql_fields() == " id ,  user_name ,  note "

    def test_pydantic_nested_alias_path_rejected(self) -> None:
        with pytest.raises(UnsupportedRecordError, match="nested path"):
            postgres_mapper(table="located")(Located)


class TestDefinitionErrors:
    def test_missing_table_leaves_class_untouched(self) -> None:
        with pytest.raises(MissingTableError, match="declare table name"):
            postgres_mapper()(Bare)
        assert not hasattr(Bare, "from_row")
        assert PLAN_ATTRIBUTE not in Bare.__dict__

    def test_unknown_container_attribute(self) -> None:
        with pytest.raises(UnknownContainerAttributeError):
            postgres_mapper(table="bare", schema="public")(Bare)

    def test_enum_rejected(self) -> None:
        with pytest.raises(UnsupportedRecordError, match="Enums or Unions"):
            postgres_mapper(table="moods")(Mood)

    def test_excluded_field_without_default(self) -> None:
        with pytest.raises(MissingDefaultError):
            postgres_mapper(table="x")(NeedsDefault)

    def test_derive_functional_form(self) -> None:
        @dataclass
        class Local:
            id: int

        derived = derive(Local, [PgMapper(table="locals")], options=MapperOptions())
        assert derived is Local
        assert Local.sql_table() == "locals"  # type: ignore[attr-defined]

    def test_debug_log(self, caplog: pytest.LogCaptureFixture) -> None:
        @dataclass
        class Logged:
            id: int

        with caplog.at_level(logging.DEBUG, logger="pg_mapper.mapping.derive"):
            postgres_mapper(table="logged")(Logged)
        assert "Logged" in caplog.text
        assert "table=logged" in caplog.text

    def test_local_records_resolve_each_other(self) -> None:
        @postgres_mapper(table="tags")
        @dataclass
        class Tag:
            label: str

        @postgres_mapper(table="posts")
        @dataclass
        class Post:
            id: int
            tag: Annotated[Tag, Flatten]

        post = Post.from_row({"id": 1, "label": "x"})  # type: ignore[attr-defined]
        assert post.tag == Tag(label="x")
