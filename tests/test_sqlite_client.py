from pathlib import Path

from feedbacksense.db.sqlite_client import SQLiteClient


def test_set_get_and_delete_values(tmp_path: Path) -> None:
    client = SQLiteClient(tmp_path / "nested" / "kv.db")
    client.initialize_schema()

    assert client.get_value("missing") is None

    client.set_value("key", "first")
    client.set_value("key", "second")
    assert client.get_value("key") == "second"

    client.delete_value("key")
    client.delete_value("key")
    assert client.get_value("key") is None
    client.close()


def test_values_persist_across_connections(tmp_path: Path) -> None:
    path = tmp_path / "kv.db"
    writer = SQLiteClient(path)
    writer.initialize_schema()
    writer.set_value("feedback_items", "[]")
    writer.close()

    reader = SQLiteClient(path)
    reader.initialize_schema()
    assert reader.get_value("feedback_items") == "[]"
    reader.close()


def test_in_memory_database() -> None:
    client = SQLiteClient(":memory:")
    client.initialize_schema()
    client.set_value("a", "1")

    assert client.get_value("a") == "1"
    row = client.connection.execute("SELECT updated_at FROM kv_store").fetchone()
    assert row["updated_at"].endswith("Z")
