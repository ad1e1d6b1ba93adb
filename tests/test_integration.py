"""Integration tests for end-to-end workflows."""

import shutil

from fintrack.cli.main import cli


def _extract_id(output):
    # "Created credit card 'Roxinho' (ID: 1)"
    for line in output.split("\n"):
        if "ID:" in line:
            return line.split("ID:")[1].strip().rstrip(")")
    return None


def test_full_workflow(cli_runner, temp_db, fixtures_dir, tmp_path):
    """Test complete workflow: categories → card → mappings → import → categorize → list."""
    db = ["--db-path", temp_db.database_path]

    # Step 1: Initialize categories and built-in mappings
    result = cli_runner.invoke(cli, [*db, "init-categories"])
    assert result.exit_code == 0
    result = cli_runner.invoke(cli, [*db, "mapping", "init-defaults"])
    assert result.exit_code == 0

    # Step 2: Create an Inter card, which picks up the Inter mapping
    result = cli_runner.invoke(
        cli, [*db, "card", "create", "Inter Black", "--user", "1", "--institution", "Inter"]
    )
    assert result.exit_code == 0
    card_id = _extract_id(result.output)
    assert card_id is not None

    # Step 3: Import a statement and remove it afterwards
    statement = tmp_path / "inter.csv"
    shutil.copy(fixtures_dir / "inter_statement.csv", statement)
    result = cli_runner.invoke(
        cli, [*db, "import", str(statement), "--user", "1", "--card", card_id, "--delete-after"]
    )
    assert result.exit_code == 0
    assert "Import complete (mapping: Inter Padrão)" in result.output
    assert "Imported: 2 transactions" in result.output
    assert "Categorized: 2" in result.output
    assert not statement.exists()

    # Step 4: Import a Nubank file without a card, using the default institution
    result = cli_runner.invoke(
        cli, [*db, "import", str(fixtures_dir / "nubank_sample.csv"), "--user", "1"]
    )
    assert result.exit_code == 0
    assert "Import complete (mapping: Nubank Padrão)" in result.output
    assert "Imported: 4 transactions" in result.output

    # Step 5: Correct one category by hand
    temp_db.disconnect()
    netflix = next(t for t in temp_db.list_transactions(user_id=1) if t.description == "Netflix.com")
    result = cli_runner.invoke(cli, [*db, "categorize", str(netflix.id), "Serviços"])
    assert result.exit_code == 0

    # Step 6: Re-running categorization keeps the manual choice
    result = cli_runner.invoke(cli, [*db, "recategorize", "--user", "1", "--all"])
    assert result.exit_code == 0
    assert "Categorized 5 of 5 transactions" in result.output

    # Step 7: View the result
    result = cli_runner.invoke(cli, [*db, "transaction", "list", "--user", "1", "--category", "Serviços"])
    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output
    assert "Netflix.com" in result.output

    result = cli_runner.invoke(cli, [*db, "transaction", "list", "--user", "1", "--category", "Alimentação"])
    assert "SUPERMERCADO EXTRA" in result.output
