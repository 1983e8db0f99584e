"""
Node editing for jsongraph.

This package provides the edit-in-place flow of the node dialog:
- EditSession: viewing/editing/committing state of the selected node
- commit_node_edit: writes an edited node back into the canonical document
- InlineEdit: temporary state of a single-value quick edit

Usage:
    from jsongraph.edit import EditSession, EditMode
    from jsongraph.edit.sync import commit_node_edit
"""

from jsongraph.edit.sync import CommitResult, commit_node_edit
from jsongraph.edit.session import EditSession, EditState, EditMode
from jsongraph.edit.inline import InlineEdit

__all__ = [
    'EditSession',
    'EditState',
    'EditMode',
    'CommitResult',
    'commit_node_edit',
    'InlineEdit',
]
