"""Integration tests for end-to-end workflows."""

import json

from envelopes.cli.main import cli


def test_full_workflow(cli_runner, temp_db):
    """Account, categories, income, assignment, spending, rollover, move, target."""
    base = ["--db-path", temp_db.database_path, "--owner", "household"]

    def run(*args):
        result = cli_runner.invoke(cli, base + list(args))
        assert result.exit_code == 0, result.output
        return result

    run("account", "create", "Checking")
    run("category", "group-create", "Everyday")
    run("category", "create", "Groceries", "--group", "Everyday")
    run("category", "create", "Dining", "--group", "Everyday")

    run("transaction", "add", "--account", "Checking", "--date", "2024-01-01", "--amount", "3000")
    run("budget", "assign", "Groceries", "500", "--month", "2024-01")
    run("budget", "assign", "Dining", "10", "--month", "2024-01")
    run(
        "transaction", "add", "--account", "Checking", "--date", "2024-01-20",
        "--amount", "-12", "--category", "Dining",
    )
    run("budget", "assign", "Dining", "5", "--month", "2024-02")

    data = json.loads(run("budget", "show", "2024-02", "--json").output)
    budgets = {b["categoryId"]: b for g in data["categoryGroups"] for b in g["budgets"]}
    dining = [b for b in budgets.values() if b["assigned"] == 500][0]
    assert data["readyToAssign"] == 300000 - 50000 - 1000 - 500
    assert dining["available"] == 300

    result = run("budget", "move", "Groceries", "Dining", "50", "--month", "2024-02")
    assert "Dining: 53.00 available" in result.output

    run("target", "set", "Groceries", "--amount", "500")
    data = json.loads(run("budget", "show", "2024-02", "--json").output)
    assert data["readyToAssign"] == 300000 - 50000 - 1000 - 500
    groceries = data["categoryGroups"][0]["budgets"][0]
    assert groceries["available"] == 45000
    assert groceries["target"]["needed"] == 0
    assert groceries["status"] == "funded"
