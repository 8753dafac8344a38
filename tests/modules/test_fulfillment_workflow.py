"""
Tests for the declarative workflow tables.

No database: these exercise the Workflow value objects and the status
normalization the fulfillment service relies on.
"""

import pytest

from printshop_kernel.domain.workflow import Transition, Workflow
from printshop_modules.fulfillment.models import RequestStatus, normalize_status
from printshop_modules.fulfillment.workflows import (
    ASSIGNMENT_ACTIONS,
    INVOICE_LINKED,
    PAYMENT_DECIDED,
    SALES_REQUEST_WORKFLOW,
    STAMPED_STATES,
)
from printshop_modules.invoicing.workflows import INVOICE_WORKFLOW, REAL_NUMBER_ASSIGNED


class TestSalesRequestWorkflow:

    def test_states_match_enum(self):
        assert set(SALES_REQUEST_WORKFLOW.states) == {s.value for s in RequestStatus}
        assert SALES_REQUEST_WORKFLOW.initial_state == "pending"

    @pytest.mark.parametrize("to_state", ["processed", "in_design"])
    def test_every_exit_from_pending_needs_invoice(self, to_state):
        (edge,) = SALES_REQUEST_WORKFLOW.transitions_between("pending", to_state)
        assert edge.guard == INVOICE_LINKED

    @pytest.mark.parametrize("from_state", ["processed", "design_submitted", "in_print"])
    def test_print_assignment_needs_payment_decision(self, from_state):
        edge = SALES_REQUEST_WORKFLOW.resolve(from_state, "assign_print_operator")
        assert edge.to_state == "in_print"
        assert edge.guard == PAYMENT_DECIDED

    def test_designer_reassignment_is_a_self_loop(self):
        edge = SALES_REQUEST_WORKFLOW.resolve("in_design", "assign_designer")
        assert edge.from_state == edge.to_state == "in_design"

    def test_revision_loop_back_to_design(self):
        edge = SALES_REQUEST_WORKFLOW.resolve("design_submitted", "request_revision")
        assert edge.to_state == "in_design"

    def test_completed_is_terminal(self):
        assert SALES_REQUEST_WORKFLOW.is_terminal("completed")
        assert not any(t.from_state == "completed" for t in SALES_REQUEST_WORKFLOW.transitions)

    def test_no_skipping_print(self):
        assert SALES_REQUEST_WORKFLOW.transitions_between("in_design", "printed") == ()
        assert SALES_REQUEST_WORKFLOW.transitions_between("processed", "completed") == ()

    def test_assignment_actions_are_known(self):
        actions = {t.action for t in SALES_REQUEST_WORKFLOW.transitions}
        assert ASSIGNMENT_ACTIONS <= actions

    def test_design_submitted_does_not_stamp(self):
        assert "design_submitted" not in STAMPED_STATES
        assert "pending" not in STAMPED_STATES
        assert "completed" in STAMPED_STATES


class TestNormalizeStatus:

    def test_collected_alias(self):
        assert normalize_status("collected") == RequestStatus.COMPLETED

    def test_case_and_whitespace(self):
        assert normalize_status(" In_Print ") == RequestStatus.IN_PRINT

    def test_enum_passthrough(self):
        assert normalize_status(RequestStatus.PRINTED) is RequestStatus.PRINTED

    def test_unknown(self):
        with pytest.raises(ValueError):
            normalize_status("shipped")


class TestInvoiceWorkflow:

    def test_activation_needs_real_number(self):
        edge = INVOICE_WORKFLOW.resolve("draft", "activate")
        assert edge.to_state == "unpaid"
        assert edge.guard == REAL_NUMBER_ASSIGNED

    def test_paid_invoice_cannot_be_activated_again(self):
        assert INVOICE_WORKFLOW.resolve("paid", "activate") is None


class TestWorkflowValidation:

    def test_unknown_state_rejected(self):
        with pytest.raises(ValueError, match="unknown state"):
            Workflow(
                name="broken",
                description="",
                initial_state="a",
                states=("a",),
                transitions=(Transition("a", "b", action="go"),),
            )

    def test_ambiguous_action_rejected(self):
        with pytest.raises(ValueError, match="ambiguous"):
            Workflow(
                name="broken",
                description="",
                initial_state="a",
                states=("a", "b", "c"),
                transitions=(
                    Transition("a", "b", action="go"),
                    Transition("a", "c", action="go"),
                ),
            )

    def test_initial_state_must_exist(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow(name="broken", description="", initial_state="x", states=("a",), transitions=())
