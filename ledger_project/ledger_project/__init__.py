# Celery instance is defined in ledger_project/celery.py
# Importing it here makes sure the app is loaded when Django starts,
# so @shared_task in ledger_core.tasks binds to it
from .celery import celery_app

# 'from ledger_project import *', only exports celery_app
__all__ = ("celery_app",)

""" Run a worker with "celery -A ledger_project worker -l info" """
