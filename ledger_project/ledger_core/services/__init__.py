from .audit import get_audit_log, log_action
from .chart import (ChartNode, ChartTree, SeedResult, build_tree,
                    deactivate_account, get_account, get_account_by_code,
                    get_account_tree, seed_from_template, update_account)
from .config import (ConfigCheck, get_accounting_config, get_config_account,
                     update_accounting_config, validate_config)
from .journal import (approve_entry, create_entry, get_entry, list_entries,
                      list_lines, update_entry, void_entry)
from .ledger import (AccountLedger, Movement, get_account_balance,
                     get_account_movements, get_general_ledger)
from .periods import (PeriodStatus, assert_open, close_period,
                      get_period_status, is_closed, list_periods,
                      lock_company, period_for, reopen_period)
from .reports import (BalanceSheet, ProfitAndLoss, RolledBalance,
                      StatementLine, get_balance_sheet, get_profit_and_loss,
                      get_third_party_auxiliary, rollup_balances,
                      sum_by_prefix)
from .trial_balance import (EquationCheck, TrialBalance, TrialBalanceRow,
                            TrialBalanceTotals, check_accounting_equation,
                            get_trial_balance)
