from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

import bb_society
from bb_society.common.datetime_utils import calendar_date
from bb_society.core.exceptions import ValidationError
from bb_society.database.bootstrap import DEFAULT_SCHEMA_PATH, iter_sql_statements, strip_create_db_and_use
from bb_society.database.mysql_base import json_list, normalize_mysql_time, optional_float


def test_json_list_decodes_json_arrayagg_values():
    assert json_list(None) == ()
    assert json_list('["Ms Lee", "Mr Tan"]') == ("Ms Lee", "Mr Tan")
    assert json_list(b"[1, 2]") == (1, 2)
    assert json_list([3, None]) == (3,)


def test_json_list_rejects_non_arrays():
    with pytest.raises(TypeError):
        json_list('{"a": 1}')


@pytest.mark.parametrize(
    "value, expected",
    [
        (time(8, 30), time(8, 30)),
        (timedelta(hours=9, minutes=15), time(9, 15)),
        ("14:05:30", time(14, 5, 30)),
        ("07:45", time(7, 45)),
        (None, None),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected


def test_optional_float_converts_decimal():
    assert optional_float(Decimal("72.50")) == 72.5
    assert optional_float(None) is None


def test_calendar_date_normalizes_representations():
    assert calendar_date(date(2025, 3, 1)) == date(2025, 3, 1)
    assert calendar_date(datetime(2025, 3, 1, 23, 59)) == date(2025, 3, 1)
    assert calendar_date("2025-03-01T00:00:00Z") == date(2025, 3, 1)


@pytest.mark.parametrize("value", ["03/01/2025", 20250301, None])
def test_calendar_date_rejects_unknown_values(value):
    with pytest.raises(ValidationError):
        calendar_date(value)


def test_strip_create_db_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS bb;\nUSE bb;\nCREATE TABLE t (id INT);\n"

    assert strip_create_db_and_use(sql).strip() == "CREATE TABLE t (id INT);"


def test_iter_sql_statements_respects_quotes_and_comments():
    sql = (
        "-- schools; seeded below\n"
        "CREATE TABLE a (id INT);\n"
        "INSERT INTO a (name) VALUES ('x;y'), ('it\\'s');\n"
        "  ;\n"
        "SELECT 1"
    )

    statements = list(iter_sql_statements(sql))

    assert statements == [
        "CREATE TABLE a (id INT)",
        "INSERT INTO a (name) VALUES ('x;y'), ('it\\'s')",
        "SELECT 1",
    ]


def test_schema_ships_inside_the_package():
    assert DEFAULT_SCHEMA_PATH.is_file()
    assert DEFAULT_SCHEMA_PATH.is_relative_to(Path(bb_society.__file__).resolve().parent)
    statements = list(iter_sql_statements(strip_create_db_and_use(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8"))))
    assert any("CREATE TABLE IF NOT EXISTS student_attendance" in s for s in statements)
