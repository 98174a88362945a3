# SPDX-License-Identifier: MIT

from beeline.model.operation import ReconcilePlan


def get_reconcile_plan_template() -> ReconcilePlan:
    return {
        "operations": [],
        "orphans": [],
    }
