"""Tests for the per-call facades over caller-held connections."""

import pytest

from sql_data_access import (
    CommandType,
    DataAccessConfigurationError,
    DataAccessException,
    ParameterDirection,
    PostgreSqlDataAccessBase,
    SqlCredentials,
    SqlParameter,
    SqlServerDataAccessBase,
    SqlServerDataAccessException,
)
from sql_data_access.core.reader import DataReader

from .conftest import FakeDriverError, FakeResult


@pytest.fixture
def base(sqlserver_dialect):
    return SqlServerDataAccessBase(
        SqlCredentials("Server=rw;Database=app", "Server=ro;Database=app"), dialect=sqlserver_dialect
    )


class TestConnections:
    def test_open_connection_uses_read_write_string(self, base, pyodbc_driver):
        connection = base.open_connection()
        assert "SERVER=rw;" in connection.args[0]
        assert pyodbc_driver.connections == [connection]

    def test_open_readonly_connection(self, base):
        connection = base.open_readonly_connection()
        assert "SERVER=ro;" in connection.args[0]

    def test_open_explicit_connection_string(self, base):
        connection = base.open_connection("Server=other")
        assert "SERVER=other;" in connection.args[0]

    def test_readonly_requires_configuration(self, sqlserver_dialect):
        base = SqlServerDataAccessBase("Server=rw", dialect=sqlserver_dialect)
        with pytest.raises(DataAccessConfigurationError, match="Readonly Connection String"):
            base.open_readonly_connection()

    def test_open_failure_translated(self, base, pyodbc_driver):
        pyodbc_driver.fail_connect = FakeDriverError("08001", "login timeout expired")
        with pytest.raises(SqlServerDataAccessException) as excinfo:
            base.open_connection()
        assert "login timeout expired" in str(excinfo.value)
        assert excinfo.value.__cause__ is pyodbc_driver.fail_connect

    def test_invalid_connection_string_is_generic(self, sqlserver_dialect):
        base = SqlServerDataAccessBase("Database=app", dialect=sqlserver_dialect)
        with pytest.raises(DataAccessException) as excinfo:
            base.open_connection()
        assert type(excinfo.value) is DataAccessException
        assert isinstance(excinfo.value.__cause__, ValueError)


class TestExecution:
    def test_non_query_returns_rowcount_and_closes_cursor(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(rowcount=3))
        count = base.execute_non_query(
            fake_connection, CommandType.TEXT, "UPDATE t SET x = @x", SqlParameter("x", 1)
        )
        assert count == 3
        assert fake_connection.executed == [("UPDATE t SET x = ?", [1])]
        assert fake_connection.cursors[0].closed

    def test_scalar_returns_first_column(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(columns=["n", "m"], rows=[(42, 1), (7, 2)]))
        assert base.execute_scalar(fake_connection, CommandType.TEXT, "SELECT n, m FROM t") == 42
        assert fake_connection.cursors[0].closed

    def test_scalar_empty_result_is_none(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(columns=["n"], rows=[]))
        assert base.execute_scalar(fake_connection, CommandType.TEXT, "SELECT n FROM t", result_type=int) is None

    def test_scalar_without_result_set_is_none(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(rowcount=1))
        assert base.execute_scalar(fake_connection, CommandType.STORED_PROCEDURE, "dbo.usp_touch") is None

    def test_scalar_result_type_conversion(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(columns=["n"], rows=[("12",)]))
        assert base.execute_scalar(fake_connection, CommandType.TEXT, "SELECT '12'", result_type=int) == 12

    def test_scalar_failed_conversion_is_generic(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(columns=["n"], rows=[("abc",)]))
        with pytest.raises(DataAccessException) as excinfo:
            base.execute_scalar(fake_connection, CommandType.TEXT, "SELECT 'abc'", result_type=int)
        assert type(excinfo.value) is DataAccessException
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_reader_stays_open_for_caller(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(columns=["id", "name"], rows=[(1, "a"), (2, "b")]))
        reader = base.execute_reader(fake_connection, CommandType.TEXT, "SELECT id, name FROM users")
        assert isinstance(reader, DataReader)
        assert not reader.is_closed
        assert not fake_connection.cursors[0].closed
        assert reader.read()
        assert reader["id"] == 1
        assert reader["NAME"] == "a"
        assert reader.as_dict() == {"id": 1, "name": "a"}
        assert list(reader) == [(2, "b")]
        reader.close()
        assert fake_connection.cursors[0].closed

    def test_driver_failure_translated_and_cursor_closed(self, base, fake_connection):
        fake_connection.outcomes.append(FakeDriverError("timeout"))
        with pytest.raises(SqlServerDataAccessException) as excinfo:
            base.execute_non_query(
                fake_connection, CommandType.TEXT, "SELECT 1", SqlParameter("id", 5), SqlParameter("name", "bob")
            )
        err = excinfo.value
        assert "timeout" in str(err)
        assert err.command_text == "SELECT 1"
        assert err.command_type == "Text"
        assert "id : 5\nname : bob\n" in err.sql_parameters
        assert err.driver_error is err.__cause__
        assert fake_connection.cursors[0].closed

    def test_reader_failure_closes_cursor(self, base, fake_connection):
        fake_connection.outcomes.append(FakeDriverError("deadlock"))
        with pytest.raises(SqlServerDataAccessException):
            base.execute_reader(fake_connection, CommandType.TEXT, "SELECT 1")
        assert fake_connection.cursors[0].closed

    def test_driver_failure_without_parameters_has_no_dump(self, base, fake_connection):
        fake_connection.outcomes.append(FakeDriverError("timeout"))
        with pytest.raises(SqlServerDataAccessException) as excinfo:
            base.execute_scalar(fake_connection, CommandType.TEXT, "SELECT 1")
        assert excinfo.value.sql_parameters is None

    def test_unsupported_command_type_is_generic(self, base, fake_connection):
        with pytest.raises(DataAccessException) as excinfo:
            base.execute_reader(fake_connection, CommandType.TABLE_DIRECT, "users")
        assert type(excinfo.value) is DataAccessException
        assert fake_connection.executed == []


class TestPostgres:
    def test_table_direct_reader(self, postgres_dialect, fake_connection):
        base = PostgreSqlDataAccessBase("host=db", dialect=postgres_dialect)
        fake_connection.outcomes.append(FakeResult(columns=["id"], rows=[(1,), (2,)]))
        reader = base.execute_reader(fake_connection, CommandType.TABLE_DIRECT, "users")
        assert reader.columns == ["id"]
        assert reader.field_count == 1
        assert reader.fetchall() == [(1,), (2,)]
        assert fake_connection.executed == [("SELECT * FROM users", None)]

    def test_construction_strategies(self, postgres_dialect):
        built = [
            PostgreSqlDataAccessBase.from_strings("host=a", "host=b", dialect=postgres_dialect),
            PostgreSqlDataAccessBase.from_credentials(SqlCredentials("host=a", "host=b"), dialect=postgres_dialect),
            PostgreSqlDataAccessBase.from_lookup(
                "ConnectionStrings:Main", lookup={"ConnectionStrings:Main": "host=a"}.get, dialect=postgres_dialect
            ),
        ]
        assert [b.connection_string for b in built] == ["host=a", "host=a", "host=a"]
        assert [b.read_only_connection_string for b in built] == ["host=b", "host=b", None]


class TestRowCountResults:
    """Batches that report row counts before their rows."""

    def test_scalar_skips_row_count_results(self, base, fake_connection):
        fake_connection.outcomes.append([
            FakeResult(rowcount=1),
            FakeResult(columns=["id"], rows=[(42,)]),
        ])
        value = base.execute_scalar(
            fake_connection, CommandType.TEXT, "INSERT INTO t (x) VALUES (1); SELECT SCOPE_IDENTITY()"
        )
        assert value == 42
        assert fake_connection.cursors[0].closed

    def test_scalar_with_only_row_counts_is_none(self, base, fake_connection):
        fake_connection.outcomes.append([FakeResult(rowcount=1), FakeResult(rowcount=2)])
        assert base.execute_scalar(fake_connection, CommandType.STORED_PROCEDURE, "dbo.usp_touch") is None

    def test_reader_positioned_on_first_row_set(self, base, fake_connection):
        fake_connection.outcomes.append([
            FakeResult(rowcount=3),
            FakeResult(columns=["id"], rows=[(1,), (2,)]),
        ])
        reader = base.execute_reader(fake_connection, CommandType.STORED_PROCEDURE, "dbo.usp_list")
        assert reader.field_count == 1
        assert reader.fetchall() == [(1,), (2,)]

    def test_next_result_moves_between_row_sets(self, base, fake_connection):
        fake_connection.outcomes.append([
            FakeResult(columns=["a"], rows=[(1,)]),
            FakeResult(rowcount=1),
            FakeResult(columns=["b", "c"], rows=[(2, 3)]),
        ])
        reader = base.execute_reader(fake_connection, CommandType.TEXT, "SELECT a; UPDATE t SET x=1; SELECT b, c")
        assert reader.columns == ["a"]
        assert reader.next_result()
        assert reader.columns == ["b", "c"]
        assert reader.read()
        assert reader["c"] == 3
        assert not reader.next_result()
        assert reader.field_count == 0
        assert not reader.read()

    def test_rows_affected(self, base, fake_connection):
        fake_connection.outcomes.append(FakeResult(columns=["id"], rows=[(1,)], rowcount=1))
        reader = base.execute_reader(fake_connection, CommandType.TEXT, "SELECT id FROM t")
        assert reader.rows_affected == 1


def test_failure_dump_shows_bound_output_value(base, fake_connection):
    fake_connection.outcomes.append(FakeDriverError("timeout"))
    with pytest.raises(SqlServerDataAccessException) as excinfo:
        base.execute_non_query(
            fake_connection,
            CommandType.STORED_PROCEDURE,
            "dbo.usp_out",
            SqlParameter("id", 1),
            SqlParameter("out", direction=ParameterDirection.OUTPUT),
        )
    assert excinfo.value.sql_parameters == "Parameters:\nName : Value\nid : 1\nout : \n"
