"""
Chart of accounts: tree building, template seeding and account upkeep.

The hierarchy is derived purely from account codes. A code's parent is
the code truncated to the previous length bucket (2→1, 4→2, 6→4, ...),
so the tree is an index of nodes keyed by code and cannot contain cycles.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import NamedTuple

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import AccountNotFoundError, OrphanAccountError
from ..models import (Account, AuditAction, default_nature, level_for_code,
                      parent_code_for)
from .audit import log_action
from .periods import lock_company
from .puc import PUC_TEMPLATE

logger = logging.getLogger(__name__)


@dataclass
class ChartNode:
    code: str
    name: str
    ac_type: str
    nature: str
    level: int
    parent_code: str | None
    account_id: int | None = None
    tags: tuple = ()
    children: list = field(default_factory=list)  # child codes, sorted


@dataclass
class ChartTree:
    nodes: dict
    roots: list

    def __getitem__(self, code):
        return self.nodes[code]

    def __contains__(self, code):
        return code in self.nodes

    def __len__(self):
        return len(self.nodes)

    def walk(self):
        """Depth-first, parents before children, siblings by code."""
        stack = list(reversed(self.roots))
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def descendants(self, code):
        out = []
        stack = list(reversed(self.nodes[code].children))
        while stack:
            node = self.nodes[stack.pop()]
            out.append(node)
            stack.extend(reversed(node.children))
        return out


class SeedResult(NamedTuple):
    initialized: bool
    count: int


def build_tree(accounts):
    """
    Resolve every account's parent by code prefix.

    `accounts` is any iterable of objects with code/name/ac_type
    (Account rows or TemplateAccount tuples). Raises OrphanAccountError
    if a non-root account's parent code is not in the set.
    """
    nodes = {}
    for acc in accounts:
        if acc.code in nodes:
            raise ValidationError(f"Duplicate account code {acc.code}")
        nodes[acc.code] = ChartNode(
            code=acc.code,
            name=acc.name,
            ac_type=acc.ac_type,
            nature=getattr(acc, "nature", None) or default_nature(acc.ac_type),
            level=level_for_code(acc.code),
            parent_code=parent_code_for(acc.code),
            account_id=getattr(acc, "pk", None),
            tags=tuple(getattr(acc, "tags", None) or ()),
        )

    roots = []
    for code in sorted(nodes):
        node = nodes[code]
        if node.parent_code is None:
            roots.append(code)
            continue
        parent = nodes.get(node.parent_code)
        if parent is None:
            raise OrphanAccountError(code, node.parent_code)
        parent.children.append(code)

    return ChartTree(nodes=nodes, roots=roots)


def seed_from_template(company, template=PUC_TEMPLATE, user=None):
    """
    Create a company's chart of accounts from a template.
    A company that already has any account is left untouched.
    """
    with transaction.atomic():
        # Two concurrent seeders must not both see an empty chart
        lock_company(company)

        if Account.objects.filter(company=company).exists():
            logger.info("Chart of accounts already initialized for company %s", company.pk)
            return SeedResult(initialized=False, count=0)

        # Validate the whole template before writing anything
        build_tree(template)

        created = {}
        # Parents first: shorter codes are created before longer ones
        for item in sorted(template, key=lambda a: (len(a.code), a.code)):
            account = Account(
                company=company,
                code=item.code,
                name=item.name,
                ac_type=item.ac_type,
                nature=item.nature or default_nature(item.ac_type),
                parent=created.get(parent_code_for(item.code)),
                tags=list(item.tags),
            )
            account.save()
            created[item.code] = account

        log_action(
            action=AuditAction.COA_SEEDED,
            instance=company,
            company=company,
            user=user,
            changes={"count": len(created)},
        )

    logger.info("Seeded %d accounts for company %s", len(created), company.pk)
    return SeedResult(initialized=True, count=len(created))


def _without(tree, hidden):
    """Copy of tree without the hidden codes and everything below them."""
    roots = [code for code in tree.roots if code not in hidden]
    nodes = {}
    stack = list(roots)
    while stack:
        node = tree.nodes[stack.pop()]
        kept = [code for code in node.children if code not in hidden]
        nodes[node.code] = replace(node, children=kept)
        stack.extend(kept)
    return ChartTree(nodes=nodes, roots=roots)


def get_account_tree(company, include_inactive=True):
    accounts = list(Account.objects.for_company(company).order_by("code"))
    tree = build_tree(accounts)
    if include_inactive:
        return tree
    # An inactive account hides its whole branch
    return _without(tree, {a.code for a in accounts if not a.is_active})


def get_account(company, account_id, active_only=False):
    qs = Account.objects.for_company(company)
    if active_only:
        qs = qs.filter(is_active=True)
    try:
        return qs.get(pk=account_id)
    except (Account.DoesNotExist, ValueError, TypeError):
        raise AccountNotFoundError(account_id)


def get_account_by_code(company, code):
    try:
        return Account.objects.for_company(company).get(code=code)
    except Account.DoesNotExist:
        raise AccountNotFoundError(code)


def deactivate_account(company, account_id, user=None):
    """Soft-deactivate: history stays, new postings are refused."""
    with transaction.atomic():
        account = get_account(company, account_id)
        if not account.is_active:
            return account
        active_children = account.children.filter(is_active=True)
        if active_children.exists():
            raise ValidationError(
                f"Account {account.code} still has active sub-accounts: "
                + ", ".join(active_children.values_list("code", flat=True)))
        account.is_active = False
        account.save(update_fields=["is_active"])
        log_action(
            action=AuditAction.ACCOUNT_DEACTIVATED,
            instance=account,
            user=user,
            changes={"code": account.code},
        )
    return account


def update_account(company, account_id, user=None, *, name=None, tags=None):
    with transaction.atomic():
        account = get_account(company, account_id)
        changes = {}
        if name is not None and name != account.name:
            changes["name"] = [account.name, name]
            account.name = name
        if tags is not None and list(tags) != account.tags:
            changes["tags"] = [account.tags, list(tags)]
            account.tags = list(tags)
        if not changes:
            return account
        account.save(update_fields=["name", "tags"])
        log_action(
            action=AuditAction.ACCOUNT_UPDATED,
            instance=account,
            user=user,
            changes=changes,
        )
    return account
