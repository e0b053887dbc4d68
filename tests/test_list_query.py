import dataclasses
import os
import unittest
import uuid

from sqlalchemy import Integer, String, create_engine, delete
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from app.core.errors import ValidationFailed
from app.schemas.listing import ListQuery, parse_positive_int, parse_sort_dir
from app.services.list_query import (
    FilterBuilder,
    FilterField,
    ListResource,
    build_filter,
    coerce_uuid,
    enum_coercer,
    is_unset_filter,
    resolve_sort_field,
    run_list_query,
)
from app.models.user import UserStatus


class _Base(DeclarativeBase):
    pass


class _Item(_Base):
    __tablename__ = "_list_query_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20))


def _serialize(row, extras):
    return {"id": row.id, "name": row.name}


ITEM_RESOURCE = ListResource(
    name="items",
    model=_Item,
    sort_fields={"name": _Item.name, "status": _Item.status},
    default_sort="name",
    serialize=_serialize,
    search_columns=(_Item.name, _Item.description),
    filter_fields={"status": FilterField(_Item.status, enum_coercer(UserStatus))},
)


class ListQueryParsingTests(unittest.TestCase):
    def test_defaults_when_params_missing(self):
        lq = ListQuery.from_params({})
        self.assertEqual(lq.page, 1)
        self.assertEqual(lq.limit, 10)
        self.assertEqual(lq.search, "")
        self.assertIsNone(lq.sort_field)
        self.assertEqual(lq.sort_dir, "asc")
        self.assertEqual(lq.offset, 0)

    def test_invalid_numbers_fall_back_to_defaults(self):
        lq = ListQuery.from_params({"page": "abc", "limit": "-5"})
        self.assertEqual((lq.page, lq.limit), (1, 10))
        self.assertEqual(parse_positive_int("0", 1), 1)
        self.assertEqual(parse_positive_int(" 7 ", 1), 7)

    def test_limit_has_no_upper_bound(self):
        lq = ListQuery.from_params({"limit": "100000"})
        self.assertEqual(lq.limit, 100000)

    def test_offset_is_derived_from_page_and_limit(self):
        lq = ListQuery.from_params({"page": "3", "limit": "7"})
        self.assertEqual(lq.offset, 14)

    def test_only_exact_desc_selects_descending(self):
        self.assertEqual(parse_sort_dir("desc"), "desc")
        for raw in ("DESC", "down", "", None, "asc", " desc"):
            self.assertEqual(parse_sort_dir(raw), "asc", raw)

    def test_declared_filters_are_captured(self):
        lq = ListQuery.from_params({"status": "ACTIVE", "other": "x"}, ["status", "roleId"])
        self.assertEqual(lq.filters, {"status": "ACTIVE"})

    def test_unknown_sort_field_resolves_to_default(self):
        lq = ListQuery.from_params({"sort": "password_hash"})
        self.assertEqual(resolve_sort_field(ITEM_RESOURCE, lq), "name")
        lq = ListQuery.from_params({"sort": "status"})
        self.assertEqual(resolve_sort_field(ITEM_RESOURCE, lq), "status")

    def test_missing_and_unknown_sort_can_resolve_differently(self):
        resource = dataclasses.replace(ITEM_RESOURCE, fallback_sort="status")
        self.assertEqual(resolve_sort_field(resource, ListQuery.from_params({})), "name")
        self.assertEqual(resolve_sort_field(resource, ListQuery.from_params({"sort": ""})), "name")
        self.assertEqual(resolve_sort_field(resource, ListQuery.from_params({"sort": "bogus"})), "status")


class FilterBuilderTests(unittest.TestCase):
    def test_empty_builder_yields_empty_expression(self):
        expression = FilterBuilder().search([_Item.name], "").equals(_Item.status, None).build()
        self.assertTrue(expression.is_empty)

    def test_expression_is_immutable(self):
        expression = FilterBuilder().equals(_Item.status, "ACTIVE").build()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            expression.exact = ()

    def test_sentinel_and_blank_values_are_unset(self):
        self.assertTrue(is_unset_filter(None))
        self.assertTrue(is_unset_filter(""))
        self.assertTrue(is_unset_filter("all"))
        self.assertFalse(is_unset_filter("ACTIVE"))

    def test_all_sentinel_adds_no_predicate(self):
        lq = ListQuery.from_params({"status": "all"}, ["status"])
        self.assertTrue(build_filter(ITEM_RESOURCE, lq).is_empty)

    def test_malformed_filter_values_raise_validation_failed(self):
        with self.assertRaises(ValidationFailed):
            coerce_uuid("roleId", "not-a-uuid")
        with self.assertRaises(ValidationFailed):
            enum_coercer(UserStatus)("status", "SLEEPING")
        self.assertEqual(enum_coercer(UserStatus)("status", "active"), "ACTIVE")
        uid = uuid.uuid4()
        self.assertEqual(coerce_uuid("roleId", str(uid)), uid)


class RunListQueryTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        _Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def setUp(self):
        with Session(self.engine) as session:
            session.execute(delete(_Item))
            items = [
                _Item(id=i, name=f"item-{i:02d}", description="plain", status="ACTIVE" if i % 2 else "INACTIVE")
                for i in range(1, 13)
            ]
            items[2].description = "Running Shoes"
            items[5].description = "Leather shoes"
            items[8].name = "50% off"
            session.add_all(items)
            session.commit()

    def _run(self, params):
        with Session(self.engine) as session:
            return run_list_query(session, ITEM_RESOURCE, ITEM_RESOURCE.parse(params))

    def test_second_page_skips_offset_rows(self):
        result = self._run({"page": "2", "limit": "5"})
        self.assertEqual(result.total, 12)
        self.assertEqual(len(result.items), 5)
        first_page = self._run({"page": "1", "limit": "5"})
        everything = self._run({"limit": "100"})
        names = [item["name"] for item in everything.items]
        self.assertEqual([item["name"] for item in first_page.items], names[:5])
        self.assertEqual([item["name"] for item in result.items], names[5:10])

    def test_last_page_is_partial(self):
        result = self._run({"page": "3", "limit": "5"})
        self.assertEqual(len(result.items), 2)
        self.assertEqual(result.total, 12)
        self.assertFalse(result.is_empty_overall)

    def test_page_past_the_end_is_empty_but_not_empty_overall(self):
        result = self._run({"page": "9", "limit": "5"})
        self.assertEqual(result.items, [])
        self.assertEqual(result.total, 12)
        self.assertFalse(result.is_empty_overall)

    def test_search_is_case_insensitive_across_columns(self):
        result = self._run({"query": "SHOES"})
        self.assertEqual(result.total, 2)
        self.assertEqual(sorted(item["id"] for item in result.items), [3, 6])

    def test_search_text_is_matched_without_trimming(self):
        self.assertEqual(self._run({"query": " off"}).total, 1)
        self.assertEqual(self._run({"query": " shoes "}).total, 0)

    def test_search_escapes_like_wildcards(self):
        result = self._run({"query": "%"})
        self.assertEqual([item["name"] for item in result.items], ["50% off"])

    def test_search_without_matches_on_non_empty_table(self):
        result = self._run({"query": "nothing-like-this"})
        self.assertEqual(result.items, [])
        self.assertEqual(result.total, 0)
        self.assertFalse(result.is_empty_overall)

    def test_empty_table_reports_empty_overall(self):
        with Session(self.engine) as session:
            session.execute(delete(_Item))
            session.commit()
        for params in ({}, {"query": "shoes"}, {"status": "ACTIVE"}):
            result = self._run(params)
            self.assertEqual(result.items, [])
            self.assertEqual(result.total, 0)
            self.assertTrue(result.is_empty_overall)

    def test_exact_filter_combines_with_search(self):
        result = self._run({"status": "ACTIVE", "query": "shoes"})
        self.assertEqual([item["id"] for item in result.items], [3])

    def test_unknown_sort_falls_back_to_default_ascending(self):
        fallback = self._run({"sort": "bogus", "limit": "100"})
        by_name = self._run({"sort": "name", "limit": "100"})
        self.assertEqual(fallback.items, by_name.items)
        names = [item["name"] for item in fallback.items]
        self.assertEqual(names, sorted(names))

    def test_descending_sort(self):
        result = self._run({"sort": "name", "dir": "desc", "limit": "100"})
        names = [item["name"] for item in result.items]
        self.assertEqual(names, sorted(names, reverse=True))

    def test_garbage_direction_sorts_ascending(self):
        result = self._run({"sort": "name", "dir": "DESC", "limit": "100"})
        names = [item["name"] for item in result.items]
        self.assertEqual(names, sorted(names))

    def test_invalid_filter_value_raises(self):
        with self.assertRaises(ValidationFailed):
            self._run({"status": "SLEEPING"})


if __name__ == "__main__":
    unittest.main()
