import pytest

from tabula import QueryError, SchemaError, TableConfig, TableModel
from tabula.render import ListPayload, RowPayload

from conftest import MEMBER_COUNT, Member


def test_names_derive_from_class(make_member):
    member = make_member()
    assert member.table == "member"
    assert member.namespace == "member"
    assert member.heading() == "Member"
    assert member.list_path == "/member"


def test_explicit_table_and_heading(db, seeded):
    model = TableModel(TableConfig(table="member", heading="Members", base_path="/admin"), db)
    assert model.table == "member"
    assert model.heading() == "Members"
    assert model.list_path == "/admin/member"


def test_total_count_is_cached(make_member):
    member = make_member({"rows": "20"})

    assert member.total_count() == MEMBER_COUNT
    assert member.state.cached_row_count == MEMBER_COUNT
    assert member.total_pages() == 3

    member.delete("WHERE id > ?", 40)
    assert member.total_pages() == 3

    member.state.invalidate_count()
    assert member.total_pages() == 2


def test_get_list_pages_through_rows(make_member):
    rows = make_member({"page": "3", "sst": "id"}).get_list()
    assert [row["id"] for row in rows] == [41, 42, 43, 44, 45]


def test_get_list_sorts_by_requested_column(make_member):
    rows = make_member({"sst": "age", "sod": "desc", "rows": "5"}).get_list()
    assert [row["age"] for row in rows] == [45, 44, 43, 42, 41]


def test_unknown_sort_column_is_ignored(make_member):
    member = make_member({"sst": "age; DROP TABLE member", "rows": "5"})
    assert len(member.get_list()) == 5
    assert member.state.order_clause == ""


def test_explicit_order_and_limit(make_member):
    member = make_member({"sst": "age"})
    rows = member.get_list(order="ORDER BY id DESC", limit="LIMIT 2")
    assert [row["id"] for row in rows] == [45, 44]


def test_free_text_search_applies_to_count_and_list(make_member):
    member = make_member({"sfl": "name", "stx": "member0", "sst": "id"})

    assert member.total_count() == 9
    assert [row["name"] for row in member.get_list()][:2] == ["member01", "member02"]
    assert member.state.base_predicate == "(1)"


def test_search_on_unknown_column_is_ignored(make_member):
    assert make_member({"sfl": "nope", "stx": "x"}).total_count() == MEMBER_COUNT


def test_caller_predicate_with_bound_values(make_member):
    member = make_member()
    member.state.base_predicate = "(age BETWEEN ? AND ?)"
    member.state.where_params = [10, 19]
    assert member.total_count() == 10


def test_get_row(make_member):
    member = make_member()
    assert member.get_row("id", 3)["name"] == "member03"
    assert member.get_row("id", 999) is None
    assert member.get_row("id", 3, select="name") == {"name": "member03"}


def test_insert_drops_unknown_fields(make_member):
    member = make_member()
    result = member.insert({"name": "new", "is_admin": "1"})

    assert result.last_insert_id == MEMBER_COUNT + 1
    assert member.get_row("id", result.last_insert_id)["name"] == "new"


def test_update_and_delete(make_member):
    member = make_member()

    assert member.update({"name": "renamed"}, "WHERE id = ?", 1).rows_affected == 1
    assert member.get_row("id", 1)["name"] == "renamed"

    assert member.delete("WHERE id IN (?, ?)", [1, 2]).rows_affected == 2
    assert member.total_count() == MEMBER_COUNT - 2


def test_failed_statement_is_a_query_error(make_member):
    with pytest.raises(QueryError) as info:
        make_member().insert({"age": 3})
    assert info.value.operation == "insert"


def test_missing_table(db):
    model = TableModel(TableConfig(table="missing"), db)

    with pytest.raises(QueryError):
        model.total_count()
    with pytest.raises(SchemaError):
        model.schema_columns()


def test_request_variables(make_member):
    member = make_member({"name": "<i>Neo</i>", "bogus": "1", "email": ""})

    assert member.empty_vars(["name", "email"]) == "email"
    assert member.empty_vars(["name"]) is True
    assert member.validate_vars() == {"name": "Neo", "email": ""}


def test_rows_payload(make_member):
    payload = make_member({"sst": "id", "sod": "asc"}).rows()

    assert isinstance(payload, ListPayload)
    assert payload.heading == "Member"
    assert payload.count == MEMBER_COUNT
    assert len(payload.rows) == 20
    assert list(payload.cols) == ["id", "name", "email", "age"]
    assert "sst=name&amp;sod=ASC" in payload.cols["name"]
    assert "sst=id&amp;sod=DESC" in payload.cols["id"]
    assert 'href="#">1</a>' in payload.paging
    assert 'name="sst" value="id"' in payload.inputs


def test_rows_update_deletes_selected_ids(make_member):
    member = make_member({"req": "list-delete", "ids": ["1", "2", "x"], "page": "2"})

    assert member.rows_update() == "/member?rows=20&page=2"
    assert make_member().total_count() == MEMBER_COUNT - 2


def test_rows_update_ignores_other_actions(make_member):
    make_member({"req": "list-modify", "ids": ["1"]}).rows_update()
    assert make_member().total_count() == MEMBER_COUNT


def test_row_payload(make_member):
    payload = make_member().row(3)

    assert isinstance(payload, RowPayload)
    assert payload.row["name"] == "member03"
    assert [col.name for col in payload.cols] == ["id", "name", "email", "age"]
    assert make_member().row().row is None


def test_row_update_inserts_without_key(make_member):
    target = make_member({"name": "Neo", "age": "30", "bogus": "1"}).row_update()

    new_id = MEMBER_COUNT + 1
    assert target == f"/member/row/{new_id}?rows=20&page=1"
    row = make_member().get_row("id", new_id)
    assert row["name"] == "Neo"
    assert row["age"] == 30


def test_row_update_updates_with_key(make_member):
    target = make_member({"id": "5", "name": "Five", "sst": "name"}).row_update()

    assert target == "/member/row/5?sst=name&rows=20&page=1"
    row = make_member().get_row("id", 5)
    assert row["name"] == "Five"
    assert row["email"] == "m5@example.com"


def test_table_qualified_search_and_sort(make_member):
    member = make_member({"sfl": "member.name", "stx": "member0", "sst": "member.age", "sod": "desc", "rows": "3"})

    assert member.total_count() == 9
    assert [row["age"] for row in member.get_list()] == [9, 8, 7]
    assert member.state.search_clause == "name LIKE ?"
    assert member.state.order_clause == "ORDER BY age DESC"


def test_search_field_must_name_a_column_exactly(make_member):
    member = make_member({"sfl": "member.age > 0 OR member.name", "stx": "zzz"})
    member.state.base_predicate = "(age <= ?)"
    member.state.where_params = [3]

    assert member.total_count() == 3
    assert member.state.search_clause == ""
    assert member.state.search_params == []


def test_search_field_with_foreign_qualifier_is_ignored(make_member):
    member = make_member({"sfl": "other.name", "stx": "zzz"})
    assert member.total_count() == MEMBER_COUNT
    assert member.schema_column("other.name") is None


def test_sort_column_must_name_a_column_exactly(make_member):
    member = make_member({"sst": "member.age DESC, (SELECT 1)", "rows": "5"})

    assert len(member.get_list()) == 5
    assert member.state.order_clause == ""


def test_schema_column_returns_catalog_name(make_member):
    member = make_member()
    assert member.schema_column("age") == "age"
    assert member.schema_column("member.age") == "age"
    assert member.schema_column("AGE") is None
    assert member.schema_column("") is None


def test_oversized_page_lists_first_page(make_member):
    member = make_member({"page": "99999999999999999999", "rows": "5", "sst": "id"})

    assert member.query_params.page == 1
    assert [row["id"] for row in member.get_list()] == [1, 2, 3, 4, 5]


def test_oversized_key_value_is_a_query_error(make_member):
    with pytest.raises(QueryError) as info:
        make_member().get_row("id", 10**30)
    assert info.value.operation == "get"
