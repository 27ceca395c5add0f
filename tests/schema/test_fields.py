"""Tests for ``typedjobs.schema.fields`` - unknown keys and number-to-string."""

from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from typedjobs.schema import field_keys, stringify_numbers, unknown_keys

from tests._support.jobs import Address, NestedModel, PlaceOrder


class Contact(BaseModel):
    label: str
    number: int


class Directory(BaseModel):
    title: Optional[str] = None
    contacts: list[Contact] = Field(default_factory=list)
    by_team: dict[str, Contact] = Field(default_factory=dict)
    codes: dict[str, str] = Field(default_factory=dict)
    pair: tuple[str, ...] = ()
    either: Union[int, str] = 0
    enabled: bool = False


class Open(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str


class Aliased(BaseModel):
    user_id: int = Field(alias="userId")
    kind: str = Field(validation_alias=AliasChoices("kind", "type"))


class AliasedByName(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")


class TestFieldKeys:
    def test_plain_fields(self):
        assert set(field_keys(Contact)) == {"label", "number"}

    def test_aliases_replace_names(self):
        assert set(field_keys(Aliased)) == {"userId", "kind", "type"}

    def test_names_kept_when_populating_by_name(self):
        assert set(field_keys(AliasedByName)) == {"user_id", "userId"}


class TestUnknownKeys:
    def test_none(self):
        assert unknown_keys(Contact, {"label": "x", "number": 1}) == []

    def test_top_level(self):
        assert unknown_keys(Contact, {"label": "x", "extra": 1, "other": 2}) == ["extra", "other"]

    def test_nested_model_dict(self):
        data = {"name": "Bob", "address": {"street": "s", "city": "c", "zip": "1"}}
        assert unknown_keys(NestedModel.Args, data) == ["address.zip"]

    def test_models_in_lists_and_dicts(self):
        data = {
            "contacts": [{"label": "a", "number": 1, "note": "x"}],
            "by_team": {"ops": {"label": "b", "number": 2, "pager": True}},
        }
        assert unknown_keys(Directory, data) == ["contacts.note", "by_team.pager"]

    def test_model_instances_are_not_inspected(self):
        data = {"name": "Bob", "address": Address(street="s", city="c")}
        assert unknown_keys(NestedModel.Args, data) == []

    def test_extra_allow(self):
        assert unknown_keys(Open, {"name": "x", "anything": 1}) == []

    def test_field_name_behind_alias(self):
        assert unknown_keys(Aliased, {"user_id": 1, "type": "t"}) == ["user_id"]


class TestStringifyNumbers:
    def test_top_level_and_optional(self):
        assert stringify_numbers(Directory, {"title": 12}) == {"title": "12"}
        assert stringify_numbers(Contact, {"label": 1.5, "number": 3}) == {"label": "1.5", "number": 3}

    def test_containers(self):
        result = stringify_numbers(
            Directory,
            {
                "contacts": [{"label": 7, "number": 7}],
                "by_team": {"ops": {"label": 8, "number": 8}},
                "codes": {"a": 1},
                "pair": [1, 2],
            },
        )
        assert result == {
            "contacts": [{"label": "7", "number": 7}],
            "by_team": {"ops": {"label": "8", "number": 8}},
            "codes": {"a": "1"},
            "pair": ["1", "2"],
        }

    def test_left_alone(self):
        data = {"either": 5, "enabled": 1, "title": True, "unknown": 3}
        assert stringify_numbers(Directory, data) == data

    def test_alias_keys(self):
        assert stringify_numbers(Aliased, {"userId": 1, "type": 2}) == {"userId": 1, "type": "2"}

    def test_non_str_models_unchanged(self):
        payload = {"order_id": "1", "items": [{"sku": 5, "quantity": 2, "unit_price": 1}], "placed_at": 0}
        assert stringify_numbers(PlaceOrder.Args, payload) == {
            "order_id": "1",
            "items": [{"sku": "5", "quantity": 2, "unit_price": 1}],
            "placed_at": 0,
        }
