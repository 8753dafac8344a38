"""
Fulfillment Workflows.

The sales-request state machine as an explicit ``(state, action) -> state``
table.  Guards are first-class: ``INVOICE_LINKED`` covers every move out of
``pending`` and ``PAYMENT_DECIDED`` covers print-operator assignment.
FulfillmentService evaluates them; this module only declares them.
"""

from printshop_kernel.domain.workflow import Guard, Transition, Workflow
from printshop_kernel.logging_config import get_logger

logger = get_logger("modules.fulfillment.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

INVOICE_LINKED = Guard(
    name="invoice_linked",
    description="linked_invoice_id is set",
)

PAYMENT_DECIDED = Guard(
    name="payment_decided",
    description="payment_status is paid or debt",
)

logger.info(
    "fulfillment_workflow_guards_defined",
    extra={"guards": [INVOICE_LINKED.name, PAYMENT_DECIDED.name]},
)


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------

ASSIGN_DESIGNER = "assign_designer"
ASSIGN_PRINT_OPERATOR = "assign_print_operator"

# Reachable only through the dedicated assignment commands, which set the
# assignee and the status together.
ASSIGNMENT_ACTIONS = frozenset({ASSIGN_DESIGNER, ASSIGN_PRINT_OPERATOR})

# Entering any of these stamps processed_at, every time.
STAMPED_STATES = frozenset({"processed", "in_design", "in_print", "printed", "completed"})


# -----------------------------------------------------------------------------
# Sales Request Workflow
# -----------------------------------------------------------------------------

SALES_REQUEST_WORKFLOW = Workflow(
    name="sales_request",
    description="Print job intake to collection",
    initial_state="pending",
    states=(
        "pending",
        "processed",
        "in_design",
        "design_submitted",
        "in_print",
        "printed",
        "completed",
    ),
    transitions=(
        Transition("pending", "processed", action="process", guard=INVOICE_LINKED),
        Transition("pending", "in_design", action=ASSIGN_DESIGNER, guard=INVOICE_LINKED),
        Transition("processed", "in_design", action=ASSIGN_DESIGNER),
        Transition("in_design", "in_design", action=ASSIGN_DESIGNER),
        Transition("in_design", "design_submitted", action="submit_design"),
        Transition("design_submitted", "in_design", action="request_revision"),
        Transition("design_submitted", "in_print", action=ASSIGN_PRINT_OPERATOR, guard=PAYMENT_DECIDED),
        Transition("processed", "in_print", action=ASSIGN_PRINT_OPERATOR, guard=PAYMENT_DECIDED),
        Transition("in_print", "in_print", action=ASSIGN_PRINT_OPERATOR, guard=PAYMENT_DECIDED),
        Transition("in_print", "printed", action="mark_printed"),
        Transition("printed", "completed", action="collect"),
    ),
    terminal_states=("completed",),
)

logger.info(
    "sales_request_workflow_defined",
    extra={
        "workflow": SALES_REQUEST_WORKFLOW.name,
        "states": list(SALES_REQUEST_WORKFLOW.states),
        "transition_count": len(SALES_REQUEST_WORKFLOW.transitions),
    },
)
