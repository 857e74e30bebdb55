import pytest
from django.core.exceptions import ValidationError
from django.db.models.deletion import ProtectedError
from django.test import TestCase

from ..exceptions import AccountNotFoundError, OrphanAccountError
from ..models import (Account, AccountType, AuditAction, AuditLog, Nature,
                      level_for_code, parent_code_for)
from ..services import (build_tree, deactivate_account, get_account,
                        get_account_tree, seed_from_template, update_account)
from ..services.puc import PUC_TEMPLATE, TemplateAccount
from .factories import (D, SMALL_CHART, make_company, make_user, post,
                        seed_small_chart)


""" Code arithmetic: pure functions, no database """


@pytest.mark.parametrize("code, level", [
    ("1", 1), ("11", 2), ("1105", 3), ("110505", 4), ("11050501", 5),
])
def test_level_follows_code_length(code, level):
    assert level_for_code(code) == level


@pytest.mark.parametrize("code, parent", [
    ("1", None), ("11", "1"), ("1105", "11"), ("110505", "1105"), ("11050501", "110505"),
])
def test_parent_code_is_prefix_bucket(code, parent):
    assert parent_code_for(code) == parent


@pytest.mark.parametrize("code", ["", "123", "12345", "1a", "-1"])
def test_invalid_codes_are_rejected(code):
    with pytest.raises(ValidationError):
        level_for_code(code)


def test_build_tree_detects_orphans():
    accounts = [
        TemplateAccount("1", "Assets", AccountType.ASSET),
        TemplateAccount("1105", "Cash", AccountType.ASSET),  # "11" missing
    ]
    with pytest.raises(OrphanAccountError) as exc:
        build_tree(accounts)
    assert exc.value.code == "1105"
    assert exc.value.parent_code == "11"


def test_build_tree_rejects_duplicate_codes():
    accounts = [
        TemplateAccount("1", "Assets", AccountType.ASSET),
        TemplateAccount("1", "Assets again", AccountType.ASSET),
    ]
    with pytest.raises(ValidationError):
        build_tree(accounts)


def test_puc_template_is_a_valid_tree():
    tree = build_tree(PUC_TEMPLATE)
    assert len(tree) == len(PUC_TEMPLATE)
    assert tree.roots == ["1", "2", "3", "4", "5", "6"]
    assert tree["110505"].parent_code == "1105"
    # income defaults to credit nature, assets to debit
    assert tree["4135"].nature == Nature.CREDIT
    assert tree["1105"].nature == Nature.DEBIT


def test_walk_yields_parents_before_children():
    tree = build_tree(SMALL_CHART)
    seen = set()
    for node in tree.walk():
        if node.parent_code is not None:
            assert node.parent_code in seen
        seen.add(node.code)
    assert [n.code for n in tree.descendants("1")] == ["11", "13"]


class SeedChartTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = make_user()

    def test_seed_creates_template_with_levels_and_parents(self):
        result = seed_from_template(self.company, user=self.user)

        self.assertTrue(result.initialized)
        self.assertEqual(result.count, len(PUC_TEMPLATE))
        self.assertEqual(Account.objects.for_company(self.company).count(), len(PUC_TEMPLATE))

        # every account's level and parent agree with its code
        for account in Account.objects.for_company(self.company).select_related("parent"):
            self.assertEqual(account.level, level_for_code(account.code))
            expected_parent = parent_code_for(account.code)
            if expected_parent is None:
                self.assertIsNone(account.parent)
            else:
                self.assertEqual(account.parent.code, expected_parent)

        log = AuditLog.objects.get(action=AuditAction.COA_SEEDED)
        self.assertEqual(log.company, self.company)
        self.assertEqual(log.changes, {"count": len(PUC_TEMPLATE)})

    """ Seeding twice is a no-op """
    def test_seed_is_idempotent(self):
        seed_from_template(self.company)
        second = seed_from_template(self.company)

        self.assertFalse(second.initialized)
        self.assertEqual(second.count, 0)
        self.assertEqual(Account.objects.for_company(self.company).count(), len(PUC_TEMPLATE))
        self.assertEqual(AuditLog.objects.filter(action=AuditAction.COA_SEEDED).count(), 1)

    def test_orphan_template_writes_nothing(self):
        broken = SMALL_CHART + (TemplateAccount("7105", "Orphan", AccountType.COST_OF_SALES),)
        with self.assertRaises(OrphanAccountError):
            seed_from_template(self.company, template=broken)
        self.assertFalse(Account.objects.for_company(self.company).exists())

    def test_charts_are_per_company(self):
        other = make_company("Other Co")
        seed_small_chart(self.company)
        seed_small_chart(other)

        mine = get_account_tree(self.company)
        self.assertEqual(len(mine), len(SMALL_CHART))
        self.assertEqual(
            Account.objects.filter(code="11").count(), 2)


class AccountUpkeepTests(TestCase):

    def setUp(self):
        self.company = make_company()
        self.user = make_user()
        self.acc = seed_small_chart(self.company)

    def test_account_identity_is_immutable(self):
        cash = self.acc["11"]
        cash.code = "12"
        with self.assertRaises(ValidationError):
            cash.save()

        cash.refresh_from_db()
        cash.ac_type = AccountType.EXPENSE
        with self.assertRaises(ValidationError):
            cash.save()

    def test_parent_must_match_code_prefix(self):
        bad = Account(
            company=self.company, code="1105", name="Cash box",
            ac_type=AccountType.ASSET, parent=self.acc["13"],
        )
        with self.assertRaises(ValidationError):
            bad.save()

    def test_update_account_changes_name_and_tags_only(self):
        updated = update_account(
            self.company, self.acc["11"].pk, self.user, name="Petty cash", tags=["CASH"])

        self.assertEqual(updated.name, "Petty cash")
        self.assertEqual(updated.tags, ["CASH"])
        self.assertEqual(updated.code, "11")
        self.assertTrue(AuditLog.objects.filter(
            action=AuditAction.ACCOUNT_UPDATED, object_id=str(updated.pk)).exists())

    def test_deactivated_account_refuses_new_lines(self):
        deactivate_account(self.company, self.acc["13"].pk, self.user)

        with self.assertRaises(AccountNotFoundError):
            get_account(self.company, self.acc["13"].pk, active_only=True)
        with self.assertRaises(AccountNotFoundError):
            post(self.company, self.user, D(2024, 3, 1),
                 [(self.acc["13"], 10, 0), (self.acc["31"], 0, 10)])

    def test_parent_with_active_children_stays_active(self):
        with self.assertRaises(ValidationError):
            deactivate_account(self.company, self.acc["1"].pk, self.user)
        self.assertTrue(get_account(self.company, self.acc["1"].pk).is_active)

        # Once its children are inactive the parent can follow
        deactivate_account(self.company, self.acc["11"].pk, self.user)
        deactivate_account(self.company, self.acc["13"].pk, self.user)
        deactivate_account(self.company, self.acc["1"].pk, self.user)

        active = get_account_tree(self.company, include_inactive=False)
        self.assertNotIn("1", active)
        self.assertNotIn("11", active)
        self.assertEqual(active.roots, ["2", "3", "4", "5", "6"])
        self.assertIn("1", get_account_tree(self.company))

    def test_inactive_parent_hides_its_branch(self):
        # Flag flipped outside deactivate_account, e.g. from the admin
        Account.objects.filter(company=self.company, code="2").update(is_active=False)

        active = get_account_tree(self.company, include_inactive=False)
        self.assertNotIn("2", active)
        self.assertNotIn("21", active)
        self.assertIn("3", active)
        self.assertEqual(get_account_tree(self.company)["2"].children, ["21"])

    def test_account_used_in_lines_cannot_be_deleted(self):
        post(self.company, self.user, D(2024, 3, 1),
             [(self.acc["11"], 10, 0), (self.acc["31"], 0, 10)])
        with self.assertRaises(ProtectedError):
            self.acc["11"].delete()

    def test_account_lookup_is_tenant_scoped(self):
        other = make_company("Other Co")
        with self.assertRaises(AccountNotFoundError):
            get_account(other, self.acc["11"].pk)
