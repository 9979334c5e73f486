"""Tests for category service and commands."""

from datetime import date

import pytest

from envelopes.cli.main import cli
from envelopes.domain.entities import TargetDefinition, TargetType
from envelopes.domain.errors import (
    CrossOwnerOperationError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from envelopes.domain.month import MonthKey


def test_create_category_in_group(category_service, sample_owner):
    group_id = category_service.create_group(sample_owner.id, "Savings")
    category_id = category_service.create_category(sample_owner.id, group_id, "  Vacation ")

    category = category_service.get_category(category_id)
    assert category.name == "Vacation"
    assert category.group_id == group_id


def test_create_category_rejects_foreign_group(category_service, sample_owner, other_owner):
    group_id = category_service.create_group(other_owner.id, "Theirs")
    with pytest.raises(CrossOwnerOperationError):
        category_service.create_category(sample_owner.id, group_id, "Mine")
    with pytest.raises(NotFoundError):
        category_service.create_category(sample_owner.id, 9999, "Mine")
    with pytest.raises(ValidationError):
        category_service.create_group(sample_owner.id, "   ")


def test_find_category(category_service, sample_owner, sample_categories):
    rent = sample_categories["Rent"]
    assert category_service.find_category(sample_owner.id, "Rent").id == rent
    assert category_service.find_category(sample_owner.id, "Bills > Rent").id == rent
    assert category_service.find_category(sample_owner.id, str(rent)).id == rent
    assert category_service.find_category(sample_owner.id, "Everyday > Rent") is None


def test_rename_hide_and_move(category_service, sample_owner, sample_categories):
    dining = sample_categories["Dining"]
    bills = category_service.find_category(sample_owner.id, "Rent").group_id

    category_service.rename_category(dining, "Restaurants")
    category_service.set_category_hidden(dining, True)
    category_service.move_category(dining, bills)

    category = category_service.get_category(dining)
    assert category.name == "Restaurants"
    assert category.is_hidden is True
    assert category.group_id == bills


def test_delete_category_blocked_by_transactions(
    category_service, transaction_service, sample_account, sample_categories
):
    groceries = sample_categories["Groceries"]
    transaction_service.create_transaction(sample_account.id, date(2024, 1, 3), -100, category_id=groceries)

    with pytest.raises(DependencyError, match="1 transaction"):
        category_service.delete_category(groceries)


def test_delete_category_blocked_by_assignments(
    category_service, budget_service, sample_owner, sample_categories
):
    rent = sample_categories["Rent"]
    budget_service.set_assigned(sample_owner.id, rent, MonthKey(2024, 1), 1000)

    with pytest.raises(DependencyError):
        category_service.delete_category(rent)

    budget_service.set_assigned(sample_owner.id, rent, MonthKey(2024, 1), 0)
    category_service.delete_category(rent)
    assert category_service.get_category(rent) is None


def test_delete_category_removes_its_target(
    category_service, budget_service, temp_db, sample_owner, sample_categories
):
    dining = sample_categories["Dining"]
    budget_service.set_target(dining, TargetDefinition(type=TargetType.MONTHLY, amount=5000))

    category_service.delete_category(dining)

    assert category_service.get_category(dining) is None
    assert temp_db.get_target(dining) is None
    assert temp_db.list_targets(sample_owner.id) == []


def test_delete_group_requires_empty(category_service, sample_owner, sample_categories):
    bills = category_service.find_category(sample_owner.id, "Rent").group_id
    with pytest.raises(DependencyError):
        category_service.delete_group(bills)

    category_service.delete_category(sample_categories["Rent"])
    category_service.delete_group(bills)
    assert [g.name for g in category_service.list_groups(sample_owner.id)] == ["Everyday"]


def test_category_cli_flow(cli_runner, temp_db):
    base = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, base + ["category", "group-create", "Everyday"])
    assert result.exit_code == 0
    assert "Created category group 'Everyday'" in result.output

    result = cli_runner.invoke(cli, base + ["category", "create", "Groceries", "--group", "Everyday"])
    assert result.exit_code == 0
    assert "Created category 'Groceries' in 'Everyday'" in result.output

    result = cli_runner.invoke(cli, base + ["category", "list"])
    assert result.exit_code == 0
    assert "Everyday" in result.output
    assert "  Groceries" in result.output

    result = cli_runner.invoke(cli, base + ["category", "delete", "Everyday > Groceries"])
    assert result.exit_code == 0
    assert "Deleted category 'Groceries'" in result.output


def test_category_cli_unknown_group(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "create", "X", "--group", "Nope"]
    )
    assert result.exit_code == 1
    assert "not found" in result.output


def test_category_cli_delete_blocked(
    cli_runner, temp_db, transaction_service, sample_account, sample_categories
):
    transaction_service.create_transaction(
        sample_account.id, date(2024, 1, 3), -100, category_id=sample_categories["Dining"]
    )

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "delete", "Dining"])

    assert result.exit_code == 1
    assert "Cannot delete category" in result.output


def test_rename_and_hide_group(category_service, sample_owner, sample_categories):
    bills = category_service.find_category(sample_owner.id, "Rent").group_id

    category_service.rename_group(bills, "Fixed costs")
    category_service.set_group_hidden(bills, True)

    visible = category_service.list_groups(sample_owner.id, include_hidden=False)
    assert [g.name for g in visible] == ["Everyday"]
    assert category_service.require_group(bills).name == "Fixed costs"
    assert category_service.find_category(sample_owner.id, "Fixed costs > Rent").id == sample_categories["Rent"]
