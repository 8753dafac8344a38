"""
Invoicing Workflows.

Invoice lifecycle as an explicit transition table.  Status is a projection
of payment coverage, so the payment transitions here describe which
movements the allocator may cause; ``replace_items`` keeps the nominal
state and the service re-derives the real one afterwards.
"""

from printshop_kernel.domain.workflow import Guard, Transition, Workflow
from printshop_kernel.logging_config import get_logger

logger = get_logger("modules.invoicing.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

REAL_NUMBER_ASSIGNED = Guard(
    name="real_number_assigned",
    description="Invoice number is non-empty and not a placeholder",
)

STOCK_AVAILABLE = Guard(
    name="stock_available",
    description="Every catalog item has quantity <= available stock",
)

COLLECTED_WITHIN_TOTAL = Guard(
    name="collected_within_total",
    description="New total is not below amount already collected",
)

logger.info(
    "invoicing_workflow_guards_defined",
    extra={
        "guards": [
            REAL_NUMBER_ASSIGNED.name,
            STOCK_AVAILABLE.name,
            COLLECTED_WITHIN_TOTAL.name,
        ],
    },
)


# -----------------------------------------------------------------------------
# Invoice Workflow
# -----------------------------------------------------------------------------

INVOICE_WORKFLOW = Workflow(
    name="invoice",
    description="Print-shop invoice lifecycle",
    initial_state="draft",
    states=(
        "draft",
        "unpaid",
        "partially_paid",
        "paid",
    ),
    transitions=(
        Transition("draft", "draft", action="replace_items"),
        Transition("draft", "unpaid", action="activate", guard=REAL_NUMBER_ASSIGNED),
        Transition("unpaid", "unpaid", action="replace_items", guard=STOCK_AVAILABLE),
        Transition("partially_paid", "partially_paid", action="replace_items", guard=COLLECTED_WITHIN_TOTAL),
        Transition("paid", "paid", action="replace_items", guard=COLLECTED_WITHIN_TOTAL),
        Transition("unpaid", "partially_paid", action="receive_partial_payment"),
        Transition("unpaid", "paid", action="settle"),
        Transition("partially_paid", "partially_paid", action="receive_partial_payment"),
        Transition("partially_paid", "paid", action="settle"),
    ),
)

logger.info(
    "invoice_workflow_defined",
    extra={
        "workflow": INVOICE_WORKFLOW.name,
        "states": list(INVOICE_WORKFLOW.states),
        "transition_count": len(INVOICE_WORKFLOW.transitions),
    },
)
