import pytest

from core import sql


def test_insert_numbers_placeholders_across_rows():
    statement = sql.insert("feedback_remarks", ["id", "rating"], ("A", 1), ("B", 2))

    assert statement.text == "INSERT INTO feedback_remarks (id, rating) VALUES ($1, $2), ($3, $4)"
    assert statement.args == ("A", 1, "B", 2)


def test_insert_appends_conflict_clause():
    text, args = sql.insert("questions", ["id"], ("A",), suffix="ON CONFLICT DO NOTHING")

    assert text == "INSERT INTO questions (id) VALUES ($1) ON CONFLICT DO NOTHING"
    assert args == ("A",)


def test_insert_rejects_row_arity_mismatch():
    with pytest.raises(sql.StatementError):
        sql.insert("questions", ["id", "title"], ("A",))


def test_insert_rejects_no_rows_and_no_columns():
    with pytest.raises(sql.StatementError):
        sql.insert("questions", ["id"])
    with pytest.raises(sql.StatementError):
        sql.insert("questions", [], ("A",))


def test_update_sets_then_where():
    statement = sql.update(
        "questions",
        [("title", "New"), ("is_display", True)],
        where={"id": "ABCD1234"},
    )

    assert statement.text == "UPDATE questions SET title = $1, is_display = $2 WHERE id = $3"
    assert statement.args == ("New", True, "ABCD1234")


def test_update_requires_assignments_and_predicate():
    with pytest.raises(sql.StatementError):
        sql.update("questions", [], where={"id": "A"})
    with pytest.raises(sql.StatementError):
        sql.update("questions", [("title", "x")], where={})


def test_select_with_where_and_limit():
    statement = sql.select(["id", "title"], "questions", where={"id": "A"}, limit=1)

    assert statement.text == "SELECT id, title FROM questions WHERE id = $1 LIMIT 1"
    assert statement.args == ("A",)


def test_select_combines_predicates_with_and():
    statement = sql.select(["id"], "feedback_remarks", where={"teaching_id": "T1", "question_id": "Q1"})

    assert statement.text == "SELECT id FROM feedback_remarks WHERE teaching_id = $1 AND question_id = $2"
    assert statement.args == ("T1", "Q1")


def test_select_group_by_aggregate():
    statement = sql.select(
        ["teaching_id", "SUM(rating)/COUNT(id)"],
        "feedback_remarks",
        group_by=["teaching_id"],
    )

    assert statement.text == (
        "SELECT teaching_id, SUM(rating)/COUNT(id) FROM feedback_remarks GROUP BY teaching_id"
    )
    assert statement.args == ()


def test_values_never_reach_statement_text():
    hostile = "x'; DROP TABLE questions; --"
    statement = sql.select(["id"], "questions", where={"title": hostile})

    assert hostile not in statement.text
    assert statement.args == (hostile,)


@pytest.mark.parametrize("name", ["questions; DROP", "1abc", "", "a b"])
def test_rejects_bad_identifiers(name):
    with pytest.raises(sql.StatementError):
        sql.select(["id"], name)


def test_rejects_bad_limit():
    with pytest.raises(sql.StatementError):
        sql.select(["id"], "questions", limit=-1)
