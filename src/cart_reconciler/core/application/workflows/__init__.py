from cart_reconciler.core.application.workflows.session_merge_workflow import (
    MergeReport,
    SessionMergeWorkflow,
)

__all__ = ["MergeReport", "SessionMergeWorkflow"]
