"""SQLite DDL generation from table and index definitions."""

from .schema import ColumnDefinition, IndexDefinition, TableDefinition, check_identifier


class SQLiteSchemaBuilder:
    """Renders CREATE/DROP statements for SQLite."""

    def column_sql(self, column: ColumnDefinition, inline_primary_key: bool) -> str:
        """Render a single column clause.

        Args:
            column: Column definition
            inline_primary_key: Whether the column is the table's sole primary key

        Returns:
            Column clause such as ``id INTEGER PRIMARY KEY NOT NULL``
        """
        col_def = f"{column.name} {column.type.value}"

        if column.primary_key and inline_primary_key:
            col_def += " PRIMARY KEY"

        if not column.nullable:
            col_def += " NOT NULL"

        return col_def

    def create_table_sql(self, table: TableDefinition) -> str:
        """Generate CREATE TABLE SQL for SQLite.

        A single primary-key column is declared inline; several primary-key
        columns become a composite ``PRIMARY KEY (...)`` table constraint.

        Args:
            table: Table definition

        Returns:
            CREATE TABLE SQL statement
        """
        pk_columns = table.primary_key_columns
        inline = len(pk_columns) == 1

        clauses = [self.column_sql(col, inline) for col in table.columns]
        if len(pk_columns) > 1:
            clauses.append(f"PRIMARY KEY ({', '.join(pk_columns)})")

        columns_sql = ", ".join(clauses)
        return f"CREATE TABLE IF NOT EXISTS {table.name} ({columns_sql})"

    def create_index_sql(self, index: IndexDefinition) -> str:
        """Generate CREATE [UNIQUE] INDEX SQL for SQLite.

        Args:
            index: Index definition

        Returns:
            CREATE INDEX SQL statement
        """
        unique = "UNIQUE " if index.unique else ""
        columns_sql = ", ".join(index.columns)
        return (
            f"CREATE {unique}INDEX IF NOT EXISTS {index.name} "
            f"ON {index.table} ({columns_sql})"
        )

    def drop_table_sql(self, table_name: str) -> str:
        return f"DROP TABLE IF EXISTS {check_identifier(table_name, 'table')}"

    def drop_index_sql(self, index_name: str) -> str:
        return f"DROP INDEX IF EXISTS {check_identifier(index_name, 'index')}"
