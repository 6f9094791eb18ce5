from datetime import date, datetime, timedelta, timezone

import pytest

from dgraph_query import (
    ErrorCode,
    InvalidDateTimeError,
    QueryArg,
    VariableConflictError,
    merge_args,
)


def test_query_arg_constructs() -> None:
    arg = QueryArg("default", "camembert", "cheese")
    assert arg.type == "default"
    assert arg.value == "camembert"
    assert arg.name == "cheese"


def test_query_arg_rejects_unknown_scalar() -> None:
    with pytest.raises(ValueError, match="unsupported scalar type"):
        QueryArg("decimal", 1, "price")  # type: ignore[arg-type]


def test_datetime_arg_keeps_aware_datetime() -> None:
    moment = datetime(2008, 1, 1, 1, tzinfo=timezone(timedelta(hours=2)))
    arg = QueryArg("dateTime", moment, "birthday")
    assert arg.value is moment


def test_datetime_arg_normalizes_native_dates() -> None:
    from_date = QueryArg("dateTime", date(2008, 1, 1), "birthday")
    assert from_date.value == datetime(2008, 1, 1, tzinfo=timezone.utc)

    from_naive = QueryArg("dateTime", datetime(2008, 1, 1, 1), "birthday")
    assert from_naive.value.tzinfo is timezone.utc
    assert from_naive.value.hour == 1


def test_datetime_arg_rejects_strings() -> None:
    with pytest.raises(InvalidDateTimeError) as exc_info:
        QueryArg("dateTime", "2008-01-01T01:00:00+00:00", "birthday")
    assert exc_info.value.code == ErrorCode.INVALID_DATETIME


def test_query_args_compare() -> None:
    arg = QueryArg("int", 42, "answer")
    assert arg.compare(arg)
    assert arg.compare(QueryArg("int", 42, "answer"))
    assert QueryArg("int", 42, "answer").compare(arg)
    assert not arg.compare(QueryArg("default", 42, "answer"))
    assert not arg.compare(QueryArg("int", 9001, "answer"))
    assert not arg.compare(QueryArg("int", 42, "sixTimesNine"))
    assert arg == QueryArg("int", 42, "answer")
    assert arg != QueryArg("int", 43, "answer")


# ============================================================================
# merge_args
# ============================================================================


def test_merge_appends_new_bindings() -> None:
    hoopy = QueryArg("string", "hoopy", "isHoopy")
    frood = QueryArg("string", "frood", "isFrood")
    prez = QueryArg("string", "president of the galaxy", "isPresident")

    assert merge_args([hoopy, frood], [prez]) == [hoopy, frood, prez]


def test_merge_keeps_one_instance_of_shared_binding() -> None:
    hoopy = QueryArg("string", "hoopy", "isHoopy")
    frood = QueryArg("string", "frood", "isFrood")
    prez = QueryArg("string", "president of the galaxy", "isPresident")
    frood_copy = QueryArg("string", "frood", "isFrood")

    merged = merge_args([hoopy, frood], [prez, frood_copy])
    assert merged == [hoopy, frood, prez]
    assert merged[1] is frood


def test_merge_is_idempotent() -> None:
    args = [QueryArg("int", 1, "one"), QueryArg("bool", True, "yes")]
    assert merge_args(args, args) == args
    assert merge_args(merge_args(args, args), args) == args


def test_merge_is_commutative_for_disjoint_names() -> None:
    left = [QueryArg("int", 1, "a")]
    right = [QueryArg("int", 2, "b")]
    assert set(arg.name for arg in merge_args(left, right)) == set(
        arg.name for arg in merge_args(right, left)
    )


def test_merge_does_not_mutate_inputs() -> None:
    left = [QueryArg("int", 1, "a")]
    right = [QueryArg("int", 2, "b")]
    merge_args(left, right)
    assert len(left) == 1
    assert len(right) == 1


def test_merge_conflicting_value_raises() -> None:
    frood = QueryArg("string", "frood", "isFrood")
    ford = QueryArg("string", "Ford Prefect", "isFrood")
    with pytest.raises(VariableConflictError, match=r"\$isFrood") as exc_info:
        merge_args([frood], [ford])
    assert exc_info.value.code == ErrorCode.VARIABLE_CONFLICT
    assert exc_info.value.name == "isFrood"


def test_merge_conflicting_type_raises() -> None:
    with pytest.raises(VariableConflictError):
        merge_args([QueryArg("int", 1, "count")], [QueryArg("float", 1, "count")])
