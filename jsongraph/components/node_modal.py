"""
Node Modal Component

A dialog showing the selected node of the graph with:
- Content panel (read-only JSON view, or inputs while editing)
- Edit / Save / Cancel / Close buttons
- Inline quick edit of single values
- JSON Path panel with the accessor of the node
"""

import logging
from typing import Callable, Optional

from nicegui import ui

from jsongraph.edit.inline import InlineEdit
from jsongraph.edit.session import EditSession, EditState
from jsongraph.field_codec import value_to_text

logger = logging.getLogger(__name__)


def _render_inline_row(
    session: EditSession,
    key: Optional[str],
    text: str,
    on_committed: Callable[[], None],
) -> None:
    """One value with a pencil button that edits and commits just that value."""

    def do_save(new_text: str) -> bool:
        try:
            result = session.quick_edit(key, new_text)
        except KeyError as e:
            ui.notify(f'Cannot edit {key}: {e}', type='negative')
            return False
        if not result.ok:
            # Session stays in EDITING; drop back so the view matches the document.
            session.cancel()
            ui.notify(f'Save failed: {result.error}', type='negative')
            return False
        ui.notify('Value saved', type='positive', position='bottom', timeout=1000)
        on_committed()
        return True

    inline = InlineEdit(text, on_save=do_save)
    row = ui.row().classes('w-full items-center gap-2 no-wrap')

    def on_save_click():
        if not inline.save():
            build_row()

    def on_cancel_click():
        inline.cancel()
        build_row()

    def begin():
        inline.start()
        build_row()

    def build_row():
        row.clear()
        with row:
            if key is not None:
                ui.label(f'{key}:').classes('text-xs font-bold text-gray-400')
            if inline.is_editing:
                inp = ui.input(value=inline.temp_value).props('outlined dense').classes('flex-1')
                inp.on_value_change(lambda e: inline.update(e.value))
                ui.button(icon='save', on_click=on_save_click).props('flat dense round color=green')
                ui.button(icon='close', on_click=on_cancel_click).props('flat dense round color=grey')
            else:
                ui.label(text).classes('text-sm text-gray-200 font-mono break-all')
                ui.button(icon='edit', on_click=begin).props('flat dense round size=sm color=grey').tooltip('Quick edit')

    build_row()


def render_node_modal(
    session: EditSession,
    on_close: Optional[Callable[[], None]] = None,
) -> 'ui.dialog':
    """
    Create and return the node dialog bound to an EditSession.

    Args:
        session: EditSession holding the selected node
        on_close: Callback after the dialog closes (for any reason)

    Returns:
        The dialog instance (call dialog.open() to show)
    """
    dialog = ui.dialog()

    def handle_close():
        session.close()
        dialog.close()
        if on_close:
            on_close()

    def after_commit():
        dialog.close()
        if on_close:
            on_close()

    def do_save():
        result = session.commit()
        if result.ok:
            ui.notify('Node saved', type='positive', position='bottom', timeout=1000)
            after_commit()
        else:
            ui.notify(f'Save failed: {result.error}', type='negative')

    def do_cancel():
        if session.is_editing:
            session.cancel()
        else:
            handle_close()

    def update_field(key, value):
        # Late change events can arrive after a commit closed the buffer.
        if session.is_editing:
            session.set_field(key, value or '')

    def update_text(value):
        if session.is_editing:
            session.set_text(value or '')

    with dialog, ui.card().classes('bg-slate-900 border border-slate-700 gap-2'):
        container = ui.column().classes('w-full gap-2')

    def build_body():
        container.clear()
        state = session.state
        with container:
            if session.node is None:
                ui.label('No node selected').classes('text-sm text-gray-400')
                return

            ui.label(session.title).classes('text-base font-bold font-mono')
            with ui.row().classes('w-full items-center justify-between'):
                ui.label('Content').classes('text-xs font-bold text-gray-400')
                with ui.row().classes('gap-2 items-center'):
                    if not session.is_editing:
                        ui.button('Edit', on_click=session.start_edit).props('size=sm color=blue')
                    else:
                        ui.button('Save', on_click=do_save).props('size=sm color=green')
                        ui.button('Cancel', on_click=do_cancel).props('size=sm flat color=grey')
                    ui.button(icon='close', on_click=handle_close).props('flat round dense color=grey')

            with ui.scroll_area().classes('w-[600px] max-h-[300px]'):
                if session.is_editing:
                    if session.is_stale:
                        ui.label('The document changed since editing started').classes('text-xs text-orange-400')
                    buffer = state.buffer
                    if buffer.uses_fields:
                        with ui.column().classes('w-full gap-2'):
                            for key, raw in buffer.fields.items():
                                inp = ui.input(label=key, value=raw).props('outlined dense').classes('w-full min-w-[350px]')
                                inp.on_value_change(lambda e, k=key: update_field(k, e.value))
                    else:
                        area = ui.textarea(value=buffer.text).props('outlined autogrow').classes('w-full min-w-[350px]')
                        area.on_value_change(lambda e: update_text(e.value))
                    if state.last_error:
                        ui.label(state.last_error).classes('text-xs text-red-400')
                else:
                    ui.code(session.display_text, language='json').classes('w-full')
                    scalar_rows = [r for r in session.rows if not r.is_container]
                    if scalar_rows:
                        ui.separator().classes('my-2')
                        for row in scalar_rows:
                            _render_inline_row(session, row.key, value_to_text(row.value), after_commit)

            ui.label('JSON Path').classes('text-xs font-bold text-gray-400 mt-2')
            ui.code(session.path_display, language='json').classes('w-full')

    def on_state_change(_state: EditState):
        try:
            build_body()
        except Exception as e:
            logger.error(f"Failed to refresh node dialog: {e}")

    session.set_on_state_change(on_state_change)
    build_body()

    dialog.on('hide', lambda: session.close() if session.node is not None else None)
    return dialog
